from django.utils.translation import gettext_lazy as _
from rest_framework import serializers

from apps.catalog.serializers import MoneySerializer, ProductVariantSerializer


class IdentifierField(serializers.CharField):
    """Non-empty string id; numbers and other JSON types are rejected."""

    default_error_messages = {"invalid": _("Must be a string.")}

    def to_internal_value(self, data):
        if not isinstance(data, str):
            self.fail("invalid")
        return super().to_internal_value(data)


class QuantityField(serializers.IntegerField):
    """Positive whole number; booleans and numeric strings are rejected."""

    default_error_messages = {"invalid": _("A positive integer is required.")}

    def __init__(self, **kwargs):
        kwargs.setdefault("min_value", 1)
        super().__init__(**kwargs)

    def to_internal_value(self, data):
        if isinstance(data, bool) or not isinstance(data, (int, float)):
            self.fail("invalid")
        if isinstance(data, float) and not data.is_integer():
            self.fail("invalid")
        return super().to_internal_value(data)


class CartCostSerializer(serializers.Serializer):
    subtotalAmount = MoneySerializer(source="subtotal")
    totalAmount = MoneySerializer(source="total")


class CartLineCostSerializer(serializers.Serializer):
    subtotalAmount = MoneySerializer(source="subtotal")


class CartLineSerializer(serializers.Serializer):
    id = serializers.CharField()
    quantity = serializers.IntegerField()
    cost = CartLineCostSerializer(source="*")
    merchandise = ProductVariantSerializer()


class CartReadSerializer(serializers.Serializer):
    id = serializers.CharField()
    checkoutUrl = serializers.CharField(source="checkout_url")
    totalQuantity = serializers.IntegerField(source="total_quantity")
    cost = CartCostSerializer(source="*")
    lines = CartLineSerializer(many=True)


class CartAddSerializer(serializers.Serializer):
    merchandiseId = IdentifierField()
    quantity = QuantityField()


class CartUpdateSerializer(serializers.Serializer):
    lineId = IdentifierField()
    quantity = QuantityField()


class CartRemoveSerializer(serializers.Serializer):
    lineId = IdentifierField()
