"""URL patterns for sign-in and profile endpoints."""

from django.urls import path

from .views import GitHubCallbackView, GitHubLoginView, LogoutView, ProfileView

urlpatterns = [
    path("github", GitHubLoginView.as_view(), name="user-github"),
    path("github/callback", GitHubCallbackView.as_view(), name="user-github-callback"),
    path("profile", ProfileView.as_view(), name="user-profile"),
    path("logout", LogoutView.as_view(), name="user-logout"),
]
