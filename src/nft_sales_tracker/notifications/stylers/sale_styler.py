# -*- coding: utf-8 -*-
"""Plain-text styler for sale alerts and lifecycle notices."""

from __future__ import annotations

from typing import Any, cast

from nft_sales_tracker.notifications.types import NotificationMessage, NotificationStyler


class SaleNotificationStyler(NotificationStyler):
    """Render notifications by event_type: sale_detected, system_started, system_stopped or generic."""

    def render(self, message: NotificationMessage) -> str:
        """Dispatch to the appropriate renderer based on event_type."""
        if message.event_type == "sale_detected":
            return self._render_sale(message)
        if message.event_type in ("system_started", "system_stopped"):
            return self._render_system(message)
        return self._render_generic(message)

    def _render_sale(self, message: NotificationMessage) -> str:
        payload: dict[str, Any] = message.payload.copy() if message.payload else {}
        sale_raw = payload.get("sale")
        sale = cast(dict[str, Any], sale_raw) if isinstance(sale_raw, dict) else {}
        currency = sale.get("currency") or ""
        count = sale.get("transfer_count") or 1

        if sale.get("is_bulk_sale"):
            headline = f"Bulk sale: {count} items for {sale.get('total_price')} {currency}"
        else:
            headline = f"Sold #{sale.get('display_token_id')} for {sale.get('total_price')} {currency}"

        price_rows: list[tuple[str, Any]] = [
            ("Total", f"{sale.get('total_price')} {currency}"),
        ]
        if sale.get("is_bulk_sale"):
            price_rows.append(("Per item", f"{sale.get('price_per_item')} {currency}"))
            price_rows.append(("Tokens", ", ".join(str(t) for t in sale.get("token_ids") or [])))
        if sale.get("is_wape_sale"):
            price_rows.append(("Settlement", "accepted bid"))

        lines = [
            headline + "\n",
            self._section(
                "Sale",
                [
                    ("Marketplace", sale.get("marketplace")),
                    ("Buyer", sale.get("buyer")),
                    ("Seller", sale.get("seller")),
                ],
            ),
            self._section("Price", price_rows),
        ]

        traits = sale.get("traits") or []
        if traits:
            lines.append(
                self._section(
                    "Traits",
                    [
                        (str(t.get("trait_type")), t.get("value"))
                        for t in traits
                        if isinstance(t, dict)
                    ],
                )
            )

        lines.append(
            self._section(
                "Links",
                [
                    ("Item", sale.get("item_url")),
                    ("Transaction", sale.get("tx_url")),
                    ("Image", (sale.get("image_urls") or [None])[0]),
                ],
            )
        )
        return "\n".join(line for line in lines if line).strip()

    def _render_system(self, message: NotificationMessage) -> str:
        title = message.title or message.event_type.replace("_", " ").title()
        rows = [("", message.message)]
        payload = message.payload or {}
        for key in sorted(payload):
            rows.append((key.replace("_", " ").capitalize(), payload[key]))
        lines = [title + "\n", self._section("Status", rows)]
        return "\n".join(line for line in lines if line).strip()

    def _render_generic(self, message: NotificationMessage) -> str:
        title = message.title or message.event_type.replace("_", " ").title()
        lines = [title, message.message]
        if message.payload:
            for key in sorted(message.payload.keys()):
                value = message.payload.get(key)
                if value is not None:
                    lines.append(f"{key}: {value}")
        return "\n".join(lines).strip()

    def _section(self, header: str, rows: list[tuple[str, Any]]) -> str:
        """Format a section with a header and rows; empty values are skipped."""
        content_lines: list[str] = []
        for label, value in rows:
            if value is None or value == "":
                continue
            if label:
                content_lines.append(f"{label}: {value}")
            else:
                content_lines.append(str(value))
        if not content_lines:
            return ""
        return "\n".join([header, "─" * 12, *content_lines]) + "\n"
