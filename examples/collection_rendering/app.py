"""Collections -- render one component per item.

``ProductComponent.with_collection(products)`` renders the component for
every product. The initializer receives the item as ``product``, its
1-based position as ``product_counter`` and an `Iteration` as
``product_iteration``.

Run:
    python app.py
"""

from tessera import Component, Iteration, ViewContext


class ProductComponent(Component):
    inline_template = (
        '<li class="{{ "first" if product_iteration.first else "" }}{{ " last" if product_iteration.last else "" }}">'
        "{{ product_counter }}. {{ product.name }} ({{ currency }}{{ product.price }})</li>"
    )

    def __init__(self, product, product_counter: int, product_iteration: Iteration, currency: str = "$"):
        self.product = product
        self.product_counter = product_counter
        self.product_iteration = product_iteration
        self.currency = currency


class ProductListComponent(Component):
    inline_template = "<ul>{{ render(items) }}</ul>"

    def __init__(self, products, currency: str = "$"):
        self.items = ProductComponent.with_collection(products, currency=currency)


products = [
    {"name": "Radio", "price": 40},
    {"name": "Lamp", "price": 25},
    {"name": "Chair", "price": 80},
]

view = ViewContext()

output = view.render(ProductListComponent(products, currency="€"))


def main() -> None:
    print(output)


if __name__ == "__main__":
    main()
