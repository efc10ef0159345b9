"""GraphQL documents sent to the Storefront API."""

MONEY_FIELDS = """
  amount
  currencyCode
"""

PRODUCT_FIELDS = f"""
  fragment ProductFields on Product {{
    id
    handle
    title
    description
    featuredImage {{
      url
      altText
    }}
    priceRange {{
      minVariantPrice {{ {MONEY_FIELDS} }}
    }}
    variants(first: 20) {{
      edges {{
        node {{
          id
          title
          availableForSale
          price {{ {MONEY_FIELDS} }}
        }}
      }}
    }}
  }}
"""

CART_FIELDS = f"""
  fragment CartFields on Cart {{
    id
    checkoutUrl
    totalQuantity
    cost {{
      subtotalAmount {{ {MONEY_FIELDS} }}
      totalAmount {{ {MONEY_FIELDS} }}
    }}
    lines(first: 50) {{
      edges {{
        node {{
          id
          quantity
          cost {{
            subtotalAmount {{ {MONEY_FIELDS} }}
          }}
          merchandise {{
            ... on ProductVariant {{
              id
              title
              availableForSale
              product {{
                id
                handle
                title
              }}
              price {{ {MONEY_FIELDS} }}
            }}
          }}
        }}
      }}
    }}
  }}
"""

USER_ERROR_FIELDS = """
  userErrors {
    code
    field
    message
  }
"""

PRODUCT_LIST_QUERY = f"""
  {PRODUCT_FIELDS}
  query ProductList($first: Int!) {{
    products(first: $first) {{
      edges {{
        node {{
          ...ProductFields
        }}
      }}
    }}
  }}
"""

PRODUCT_BY_HANDLE_QUERY = f"""
  {PRODUCT_FIELDS}
  query ProductByHandle($handle: String!) {{
    product(handle: $handle) {{
      ...ProductFields
    }}
  }}
"""

COLLECTIONS_QUERY = """
  query Collections($first: Int!) {
    collections(first: $first) {
      edges {
        node {
          id
          handle
          title
          image {
            url
            altText
          }
        }
      }
    }
  }
"""

COLLECTION_BY_HANDLE_QUERY = f"""
  {PRODUCT_FIELDS}
  query CollectionByHandle($handle: String!, $productsFirst: Int!) {{
    collection(handle: $handle) {{
      id
      handle
      title
      description
      image {{
        url
        altText
      }}
      products(first: $productsFirst) {{
        edges {{
          node {{
            ...ProductFields
          }}
        }}
      }}
    }}
  }}
"""

CART_QUERY = f"""
  {CART_FIELDS}
  query CartQuery($id: ID!) {{
    cart(id: $id) {{
      ...CartFields
    }}
  }}
"""

CART_CREATE_MUTATION = f"""
  {CART_FIELDS}
  mutation CartCreate($input: CartInput!) {{
    cartCreate(input: $input) {{
      cart {{
        ...CartFields
      }}
      {USER_ERROR_FIELDS}
    }}
  }}
"""

CART_LINES_ADD_MUTATION = f"""
  {CART_FIELDS}
  mutation CartLinesAdd($cartId: ID!, $lines: [CartLineInput!]!) {{
    cartLinesAdd(cartId: $cartId, lines: $lines) {{
      cart {{
        ...CartFields
      }}
      {USER_ERROR_FIELDS}
    }}
  }}
"""

CART_LINES_UPDATE_MUTATION = f"""
  {CART_FIELDS}
  mutation CartLinesUpdate($cartId: ID!, $lines: [CartLineUpdateInput!]!) {{
    cartLinesUpdate(cartId: $cartId, lines: $lines) {{
      cart {{
        ...CartFields
      }}
      {USER_ERROR_FIELDS}
    }}
  }}
"""

CART_LINES_REMOVE_MUTATION = f"""
  {CART_FIELDS}
  mutation CartLinesRemove($cartId: ID!, $lineIds: [ID!]!) {{
    cartLinesRemove(cartId: $cartId, lineIds: $lineIds) {{
      cart {{
        ...CartFields
      }}
      {USER_ERROR_FIELDS}
    }}
  }}
"""

SHOP_HEALTH_QUERY = """
  query ShopHealth {
    shop {
      name
    }
  }
"""
