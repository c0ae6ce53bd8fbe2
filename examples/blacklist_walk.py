#!/usr/bin/env python3
"""
Walk a small web-shop model and recover from a broken page.

The checkout page always fails. With BlackListStrategy the walk marks it
FAILED, marks the confirmation page (only reachable through checkout) as
NOT_REACHABLE, and keeps covering the rest of the shop.

Run with: python examples/blacklist_walk.py
"""

from modelwalker import Edge, MachineConfig, Model, Vertex
from modelwalker.infrastructure import InMemoryExecutionEventStore, create_machine


def build_shop() -> Model:
    home = Vertex(id="home", name="v_Home")
    search = Vertex(id="search", name="v_Search")
    cart = Vertex(id="cart", name="v_Cart")
    checkout = Vertex(id="checkout", name="v_Checkout")
    confirmed = Vertex(id="confirmed", name="v_Confirmed")
    return (
        Model(name="Shop")
        .add_edge(Edge(name="e_Open", target_vertex=home))
        .add_edge(Edge(name="e_Search", source_vertex=home, target_vertex=search))
        .add_edge(Edge(name="e_Home", source_vertex=search, target_vertex=home))
        .add_edge(Edge(name="e_AddToCart", source_vertex=search, target_vertex=cart))
        .add_edge(Edge(name="e_KeepShopping", source_vertex=cart, target_vertex=home))
        .add_edge(Edge(name="e_Checkout", source_vertex=cart, target_vertex=checkout))
        .add_edge(Edge(name="e_Pay", source_vertex=checkout, target_vertex=confirmed))
    )


class ShopTest:
    """Methods named after model elements run when the walk reaches them."""

    def v_Home(self) -> None:
        print("  on the home page")

    def v_Cart(self) -> None:
        print("  cart shows one item")

    def v_Checkout(self) -> None:
        raise AssertionError("checkout page returned HTTP 500")


def main() -> None:
    events = InMemoryExecutionEventStore()
    machine = create_machine(
        build_shop(),
        MachineConfig(strategy="BlackListStrategy", seed=7, session_id="shop"),
        implementation=ShopTest(),
        event_store=events,
    )

    result = machine.run()

    print(f"\nStatus: {result.status.value} after {result.steps} steps")
    print(f"Raw coverage: {result.coverage.raw_coverage:.0%}")
    print(f"Reachable coverage: {result.coverage.reachable_coverage:.0%}")
    for vertex_id, status in machine.current_context.node_status.snapshot().items():
        print(f"  {vertex_id:<10} {status.value}")
    print(f"\n{len(events.get_events('shop'))} events recorded")


if __name__ == "__main__":
    main()
