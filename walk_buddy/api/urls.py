from django.urls import path

from .views import (
    LocationsView,
    MessagesView,
    RandomMessageView,
    RoutesView,
    StatsView,
    WalkCompleteView,
    WalkDetailView,
    WalkJoinView,
    WalkPositionView,
    WalksView,
)

urlpatterns = [
    path("locations", LocationsView.as_view(), name="locations"),
    path("routes", RoutesView.as_view(), name="routes"),
    path("messages", MessagesView.as_view(), name="messages"),
    path("messages/random", RandomMessageView.as_view(), name="random_message"),
    path("walks", WalksView.as_view(), name="walks"),
    path("walks/<int:walk_id>", WalkDetailView.as_view(), name="walk_detail"),
    path("walks/<int:walk_id>/join", WalkJoinView.as_view(), name="walk_join"),
    path("walks/<int:walk_id>/position", WalkPositionView.as_view(), name="walk_position"),
    path("walks/<int:walk_id>/complete", WalkCompleteView.as_view(), name="walk_complete"),
    path("stats", StatsView.as_view(), name="stats"),
]
