from django.urls import include, path

urlpatterns = [
    path("", include("pool_routes.urls")),
]
