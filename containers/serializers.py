from collections.abc import Mapping

from rest_framework import serializers

from containers.domain import (
    AssembleInput,
    InspectInput,
    PickInput,
    PutawayInput,
    ReceiveInput,
    ReturnInput,
)
from containers.exceptions import ValidationFailed
from containers.models import Container, Location
from containers.services.summary import status_label


# Имена полей PDA-формы (camelCase) -> имена полей операций
FIELD_ALIASES = {
    "containerCode": "container_code",
    "locationCode": "location_code",
    "materialContainer": "material_container",
    "productContainer": "product_container",
    "productSku": "product_sku",
    "productQty": "product_qty",
}

QC_DECISIONS = ("pass", "fail")

# верхняя граница PositiveIntegerField
MAX_QUANTITY = 2147483647


def normalize_fields(data) -> dict:
    """Плоский словарь полей; ключи camelCase переводятся в snake_case."""
    if not data:
        return {}
    if not isinstance(data, Mapping):
        raise ValidationFailed("Ожидается объект с полями операции")
    return {FIELD_ALIASES.get(key, key): value for key, value in data.items()}


def format_errors(errors) -> str:
    parts = []
    for field_name, messages in errors.items():
        if not isinstance(messages, (list, tuple)):
            messages = [messages]
        text = " ".join(str(m) for m in messages)
        parts.append(text if field_name == "non_field_errors" else f"{field_name}: {text}")
    return "; ".join(parts)


def parse_input(serializer_class, data):
    """
    Валидирует сырые поля операции и возвращает типизированный вход.
    Пустые строки считаются отсутствующими, количество: целое >= 0;
    нечисловое или дробное количество считается ошибкой, а не ноль.
    """
    serializer = serializer_class(data=normalize_fields(data))
    if not serializer.is_valid():
        raise ValidationFailed(format_errors(serializer.errors))
    return serializer.to_input()


# === Входы операций ===

class OperationSerializer(serializers.Serializer):
    input_class = None

    def to_input(self):
        return self.input_class(**self.validated_data)


class ReceiveSerializer(OperationSerializer):
    input_class = ReceiveInput

    container_code = serializers.CharField(max_length=64)
    sku = serializers.CharField(max_length=64)
    quantity = serializers.IntegerField(min_value=0, max_value=MAX_QUANTITY)


class InspectSerializer(OperationSerializer):
    input_class = InspectInput

    container_code = serializers.CharField(max_length=64)
    decision = serializers.CharField()

    def validate_decision(self, value):
        if value not in QC_DECISIONS:
            raise serializers.ValidationError(
                f"Неизвестное решение QC '{value}', допустимо: pass, fail."
            )
        return value


class PutawaySerializer(OperationSerializer):
    input_class = PutawayInput

    container_code = serializers.CharField(max_length=64)
    location_code = serializers.CharField(max_length=64)


class PickSerializer(OperationSerializer):
    input_class = PickInput

    container_code = serializers.CharField(max_length=64)


class AssembleSerializer(OperationSerializer):
    input_class = AssembleInput

    material_container = serializers.CharField(max_length=64)
    product_container = serializers.CharField(max_length=64)
    product_sku = serializers.CharField(max_length=64)
    product_qty = serializers.IntegerField(min_value=0, max_value=MAX_QUANTITY)


class ReturnSerializer(OperationSerializer):
    input_class = ReturnInput

    container_code = serializers.CharField(max_length=64)


# === Чтение: локации, тара, дашборд ===

class LocationSerializer(serializers.ModelSerializer):
    class Meta:
        model = Location
        fields = ["id", "code", "name", "location_type"]


class ContainerReadSerializer(serializers.ModelSerializer):
    location_code = serializers.CharField(source="location.code", read_only=True)
    item_name = serializers.CharField(read_only=True, allow_null=True, default=None)
    status_label = serializers.SerializerMethodField()

    class Meta:
        model = Container
        fields = [
            "code",
            "sku",
            "quantity",
            "status",
            "status_label",
            "location_code",
            "item_name",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields  # тара меняется только операциями движка

    def get_status_label(self, obj) -> str:
        return status_label(obj.status)


class ContainerRowSerializer(serializers.Serializer):
    code = serializers.CharField()
    sku = serializers.CharField(allow_null=True)
    quantity = serializers.IntegerField(allow_null=True)
    status = serializers.CharField(allow_null=True)
    status_label = serializers.SerializerMethodField()
    location_code = serializers.CharField(allow_null=True)
    item_name = serializers.CharField(allow_null=True)

    def get_status_label(self, obj) -> str:
        return status_label(obj.status)


class DashboardSerializer(serializers.Serializer):
    total = serializers.IntegerField()
    by_status = serializers.DictField(child=serializers.IntegerField())
    overview = serializers.DictField(child=serializers.IntegerField())
    containers = ContainerRowSerializer(many=True)
