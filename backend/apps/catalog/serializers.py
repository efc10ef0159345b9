from rest_framework import serializers

DEFAULT_PAGE_SIZE = 20
MAX_PAGE_SIZE = 100
DEFAULT_COLLECTION_PRODUCTS = 50


class MoneySerializer(serializers.Serializer):
    amount = serializers.CharField()
    currencyCode = serializers.CharField(source="currency_code")


class ImageSerializer(serializers.Serializer):
    url = serializers.CharField()
    altText = serializers.CharField(source="alt_text", allow_null=True)


class ProductRefSerializer(serializers.Serializer):
    id = serializers.CharField()
    handle = serializers.CharField()
    title = serializers.CharField()


class ProductVariantSerializer(serializers.Serializer):
    id = serializers.CharField()
    title = serializers.CharField()
    availableForSale = serializers.BooleanField(source="available_for_sale")
    price = MoneySerializer()
    product = ProductRefSerializer(allow_null=True, required=False)


class ProductReadSerializer(serializers.Serializer):
    # Matches ProductDTO shapes used for responses
    id = serializers.CharField()
    handle = serializers.CharField()
    title = serializers.CharField()
    description = serializers.CharField(allow_blank=True)
    minPrice = MoneySerializer(source="min_price")
    featuredImage = ImageSerializer(source="featured_image", allow_null=True)
    variants = ProductVariantSerializer(many=True)


class CollectionReadSerializer(serializers.Serializer):
    id = serializers.CharField()
    handle = serializers.CharField()
    title = serializers.CharField()
    description = serializers.CharField(allow_null=True, allow_blank=True)
    image = ImageSerializer(allow_null=True)
    products = ProductReadSerializer(many=True, allow_null=True, required=False)

    def to_representation(self, instance):
        data = super().to_representation(instance)
        # Listings do not fetch products; omit the key rather than sending null.
        if data.get("products") is None:
            data.pop("products", None)
        return data


class ProductListQuerySerializer(serializers.Serializer):
    first = serializers.IntegerField(
        required=False, min_value=1, max_value=MAX_PAGE_SIZE, default=DEFAULT_PAGE_SIZE
    )


class CollectionDetailQuerySerializer(serializers.Serializer):
    productsFirst = serializers.IntegerField(
        required=False,
        min_value=1,
        max_value=MAX_PAGE_SIZE,
        default=DEFAULT_COLLECTION_PRODUCTS,
    )
