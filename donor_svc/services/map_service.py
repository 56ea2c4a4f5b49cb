"""
Service layer for the blood bank map page.

Renders a self-contained HTML page with:
- an OpenStreetMap Plotly map centred on Pune, one marker per blood bank
  (red when any of its stock is below the minimum level)
- hover cards with address, phone and per-group units
- an inventory table under the map

Plotly JS is loaded from the CDN, same as every other generated page.
"""

import html
import logging
from collections import defaultdict
from typing import Dict, List

import plotly.graph_objects as go
import plotly.io as pio

from schemas import BloodBankResponse, InventoryItemResponse
from core.blood_groups import get_marker_color
from core.datetime_utils import format_for_display

logger = logging.getLogger(__name__)

# Pune city centre
DEFAULT_CENTER = {"lat": 18.5204, "lon": 73.8567}
DEFAULT_ZOOM = 11

MARKER_OK_COLOR = "#2E7D32"
MARKER_LOW_COLOR = "#C62828"

STATUS_COLORS = {
    "ok": "#E8F5E9",
    "low": "#FFF3E0",
    "critical": "#FFEBEE",
}

_PAGE_TEMPLATE = """<!DOCTYPE html>
<html>
<head>
<meta charset="utf-8">
<meta name="viewport" content="width=device-width, initial-scale=1">
<title>{title}</title>
<style>
  body {{ font-family: -apple-system, BlinkMacSystemFont, 'Segoe UI', Roboto, sans-serif; margin: 0; background: #FAFAFA; }}
  h1 {{ font-size: 20px; color: #B71C1C; margin: 16px; }}
  .section {{ margin: 0 16px 16px 16px; background: #FFFFFF; border-radius: 8px; box-shadow: 0 1px 3px rgba(0,0,0,0.08); }}
  .empty {{ padding: 24px; color: #757575; }}
</style>
</head>
<body>
<h1>{title}</h1>
<div class="section">{map_html}</div>
<div class="section">{table_html}</div>
</body>
</html>
"""


def _hover_text(bank: BloodBankResponse, items: List[InventoryItemResponse]) -> str:
    lines = [
        f"<b>{html.escape(bank.name)}</b>",
        html.escape(bank.address),
        f"Phone: {html.escape(bank.phone)}",
    ]
    if items:
        lines.append("")
        for item in sorted(items, key=lambda i: i.blood_group):
            flag = " (low)" if item.stock_status != "ok" else ""
            color = get_marker_color(item.blood_group)
            lines.append(f"<span style=\"color:{color}\">{item.blood_group}</span>: {item.units} units{flag}")
    else:
        lines.append("No inventory data")
    return "<br>".join(lines)


class MapService:
    """Builds the blood bank map page. Stateless."""

    def build_map_figure(
        self,
        banks: List[BloodBankResponse],
        items_by_bank: Dict[str, List[InventoryItemResponse]]
    ) -> go.Figure:
        colors = []
        hover = []
        for bank in banks:
            items = items_by_bank.get(bank.name, [])
            is_low = any(item.stock_status != "ok" for item in items)
            colors.append(MARKER_LOW_COLOR if is_low else MARKER_OK_COLOR)
            hover.append(_hover_text(bank, items))

        fig = go.Figure(go.Scattermap(
            lat=[bank.lat for bank in banks],
            lon=[bank.lng for bank in banks],
            mode="markers",
            marker=dict(size=14, color=colors),
            text=hover,
            hoverinfo="text",
            name="Blood banks",
        ))
        fig.update_layout(
            map_style="open-street-map",
            map_center=DEFAULT_CENTER,
            map_zoom=DEFAULT_ZOOM,
            height=520,
            margin=dict(l=0, r=0, t=0, b=0),
            showlegend=False,
        )
        return fig

    def build_inventory_table(self, items: List[InventoryItemResponse]) -> go.Figure:
        fill = [STATUS_COLORS.get(item.stock_status, "#FFFFFF") for item in items]
        fig = go.Figure(go.Table(
            header=dict(
                values=["Blood bank", "Area", "Group", "Units", "Min level", "Status", "Updated"],
                fill_color="#B71C1C",
                font=dict(color="white", size=12),
                align="left",
            ),
            cells=dict(
                values=[
                    [item.blood_bank for item in items],
                    [item.area for item in items],
                    [item.blood_group for item in items],
                    [item.units for item in items],
                    [item.min_level for item in items],
                    [item.stock_status for item in items],
                    [format_for_display(item.updated_at, include_time=True) for item in items],
                ],
                fill_color=[fill],
                align="left",
            ),
        ))
        fig.update_layout(
            height=max(200, 60 + 28 * len(items)),
            margin=dict(l=8, r=8, t=8, b=8),
        )
        return fig

    def render(
        self,
        banks: List[BloodBankResponse],
        items: List[InventoryItemResponse],
        title: str = "Blood Banks"
    ) -> str:
        """Full HTML page with the map and inventory table."""
        items_by_bank: Dict[str, List[InventoryItemResponse]] = defaultdict(list)
        for item in items:
            items_by_bank[item.blood_bank].append(item)

        map_fig = self.build_map_figure(banks, items_by_bank)
        map_html = pio.to_html(
            map_fig,
            include_plotlyjs='cdn',
            full_html=False,
            config={"scrollZoom": True, "displaylogo": False},
            div_id="blood-bank-map"
        )

        if items:
            table_html = pio.to_html(
                self.build_inventory_table(items),
                include_plotlyjs=False,
                full_html=False,
                config={"displayModeBar": False},
                div_id="inventory-table"
            )
        else:
            table_html = '<div class="empty">No inventory data</div>'

        logger.debug("Map page rendered", extra={"banks": len(banks), "items": len(items)})
        return _PAGE_TEMPLATE.format(
            title=html.escape(title),
            map_html=map_html,
            table_html=table_html
        )
