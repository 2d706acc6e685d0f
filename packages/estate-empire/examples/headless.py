"""Headless Tycoon -- a scripted landlord playing a season without a UI.

Demonstrates:
- Starting a seeded GameSession
- Buying a plot, furnishing it and picking a rent mode
- Stepping days and reacting to events and level-ups
- Saving to a slot and loading it back

Run: python examples/headless.py
"""

import tempfile

from estate_empire import GameSession, RentMode, SaveStore


def play(session: GameSession, days: int) -> None:
    for _ in range(days):
        state = session.state
        if state.active_event is not None:
            # Always take the first (safe, paid) option.
            print(f"  day {state.day}: {state.active_event.title} -> {state.active_event.options[0].label}")
            session.resolve_event(0)
        if state.level_up_pending:
            print(f"  day {state.day}: level {state.level}! {', '.join(state.pending_rewards) or '-'}")
            session.acknowledge_level_up()
        session.step()


def main() -> None:
    print("=== Headless Tycoon ===\n")

    with tempfile.TemporaryDirectory() as tmp:
        store = SaveStore(tmp)
        session = GameSession.new_game(store=store, slot=1, seed=42)

        plot = next(p for p in session.state.properties if p.district.value == "Suburbs")
        session.purchase(plot.id)
        session.upgrade_amenity(plot.id, "f1")
        session.upgrade_amenity(plot.id, "f2")
        session.set_rent_mode(plot.id, RentMode.LONG_TERM)
        print(f"Bought {plot.name} for ${plot.purchase_cost:,.0f}; cash flow ${session.cash_flow}/day\n")

        play(session, 60)

        state = session.state
        print(f"\nDay {state.day}: ${state.money:,.0f}, level {state.level}, reputation {state.reputation:.1f}")
        for notice in session.notices:
            print(f"  [{notice.kind}] {notice.message}")

        meta = session.save()
        print(f"\nSaved slot {meta.slot} at day {meta.day}.")
        restored = GameSession.load_game(store, 1)
        print(f"Loaded slot 1: day {restored.state.day}, paused={restored.paused}")


if __name__ == "__main__":
    main()
