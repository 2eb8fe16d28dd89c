# === containers/views.py (тонкие контроллеры: только HTTP и оркестрация) ===

from django.db.models import OuterRef, Subquery
from drf_spectacular.types import OpenApiTypes
from drf_spectacular.utils import extend_schema
from rest_framework import status, viewsets
from rest_framework.response import Response
from rest_framework.views import APIView

from containers.exceptions import STATUS_BY_KIND
from containers.models import Container, Item, Location
from containers.serializers import (
    ContainerReadSerializer,
    DashboardSerializer,
    LocationSerializer,
)
from containers.services.lifecycle import build_engine
from containers.services.repository import DjangoContainerRepository
from containers.services.summary import build_dashboard


# операции, создающие тару, отвечают 201
CREATING_OPERATIONS = {"receive", "receiving", "assemble", "assembly"}


class OperationView(APIView):
    """POST /api/operations/<operation>: запуск операции жизненного цикла."""

    @extend_schema(request=OpenApiTypes.OBJECT, responses=OpenApiTypes.OBJECT)
    def post(self, request, operation: str):
        result = build_engine().execute(operation, request.data)
        if result.success:
            code = status.HTTP_201_CREATED if operation in CREATING_OPERATIONS else status.HTTP_200_OK
        else:
            code = STATUS_BY_KIND[result.kind]
        return Response(result.as_dict(), status=code)


class DashboardView(APIView):
    """GET /api/dashboard: список тары и сводка по статусам, без кэша."""

    @extend_schema(responses=DashboardSerializer)
    def get(self, request):
        dashboard = build_dashboard(DjangoContainerRepository())
        summary = dashboard.summary
        serializer = DashboardSerializer({
            "total": summary.total,
            "by_status": summary.by_status,
            "overview": summary.overview(),
            "containers": dashboard.containers,
        })
        return Response(serializer.data)


class ContainerViewSet(viewsets.ReadOnlyModelViewSet):
    serializer_class = ContainerReadSerializer
    lookup_field = "code"
    filterset_fields = ["status", "location__code"]

    def get_queryset(self):
        item_name = Item.objects.filter(sku=OuterRef("sku")).values("name")[:1]
        return (
            Container.objects
            .select_related("location")
            .annotate(item_name=Subquery(item_name))
            .order_by("code")
        )


class LocationViewSet(viewsets.ReadOnlyModelViewSet):
    queryset = Location.objects.all()
    serializer_class = LocationSerializer
    lookup_field = "code"
    filterset_fields = ["location_type"]
