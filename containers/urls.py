from django.urls import path, include
from rest_framework.routers import DefaultRouter

from containers.views import ContainerViewSet, DashboardView, LocationViewSet, OperationView

router = DefaultRouter()
router.register(r'containers', ContainerViewSet, basename='container')
router.register(r'locations', LocationViewSet, basename='location')

urlpatterns = [
    path('operations/<str:operation>/', OperationView.as_view(), name='operation'),
    path('dashboard/', DashboardView.as_view(), name='dashboard'),
    path('', include(router.urls)),
]
