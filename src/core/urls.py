"""Root URL configuration for the inkfeed API."""
from django.urls import include, path
from drf_spectacular.views import SpectacularAPIView

urlpatterns = [
    path("user/", include("users.urls")),
    path("", include("feeds.urls")),
    path("", include("comments.urls")),
    path("", include("storage.urls")),
    path("schema/", SpectacularAPIView.as_view(), name="schema"),
]
