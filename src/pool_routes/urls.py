from django.urls import path

from pool_routes import views

urlpatterns = [
    path("api/v1/health", views.health_view, name="health"),
    path("api/v1/route-sequence", views.route_sequence_view, name="route-sequence"),
    path("api/v1/azure-maps/route", views.azure_maps_proxy_view, name="azure-maps-route"),
]
