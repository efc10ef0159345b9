def money(amount="25.0", currency="USD"):
    return {"amount": amount, "currencyCode": currency}


def variant_node(variant_id="gid://shopify/ProductVariant/1", available=True):
    return {
        "id": variant_id,
        "title": "Default Title",
        "availableForSale": available,
        "price": money(),
    }


def product_node(handle="tee", image=True):
    return {
        "id": f"gid://shopify/Product/{handle}",
        "handle": handle,
        "title": handle.title(),
        "description": "",
        "featuredImage": {"url": "https://cdn.example.com/tee.png", "altText": None} if image else None,
        "priceRange": {"minVariantPrice": money()},
        "variants": {"edges": [{"node": variant_node()}]},
    }


def connection(*nodes):
    return {"edges": [{"node": node} for node in nodes]}


def collection_node(handle="summer", products=None):
    node = {
        "id": f"gid://shopify/Collection/{handle}",
        "handle": handle,
        "title": handle.title(),
        "description": "",
        "image": None,
    }
    if products is not None:
        node["products"] = connection(*products)
    return node
