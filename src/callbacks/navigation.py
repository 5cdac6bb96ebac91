"""
src/callbacks/navigation.py — Routing, language toggle and overview page callbacks.
"""
from __future__ import annotations

import dash_bootstrap_components as dbc
from dash import Input, Output, State, ctx, html

from config.alerts import AlertSeverity
from src.data import store
from src.data.models import Asset, ConnectivityState
from src.i18n.translator import normalize_lang, t, text_direction
from src.layout.components.alert_badge import alert_badge, status_badge
from src.layout.components.kpi_card import kpi_card, mini_kpi
from src.layout.navbar import NAV_PAGES, lang_btn_style
from src.monitoring.registry import AssetRegistry

CARD_BG = "#161b22"
BORDER = "#30363d"
MUTED = "#8b949e"
ACCENT = "#58a6ff"
GREEN = "#2ea44f"
AMBER = "#e8a020"
RED = "#da3633"


def _bridge_card(asset: Asset, lang: str) -> dbc.Col:
    latest = asset.latest_reading
    vibration = f"{latest.vibration:.4f}" if latest else "—"
    if asset.is_calibrated:
        baseline = mini_kpi(t("bridge.baseline", lang), f"{asset.baseline:.4f}", ACCENT)
    else:
        progress = latest.calibration.progress_percent if latest and latest.calibration else 0.0
        baseline = mini_kpi(t("bridge.calibrating", lang), f"{progress:.0f}%", AMBER)

    newest_alert = asset.alerts[0] if asset.alerts else None
    border = BORDER
    if newest_alert is not None:
        border = RED if newest_alert.severity is AlertSeverity.CRITICAL else AMBER

    return dbc.Col(
        html.Div(
            [
                html.Div(
                    [
                        html.Span(asset.name, style={"fontWeight": "700", "fontSize": ".95rem"}),
                        html.Span(status_badge(asset.connectivity.value, lang), style={"marginInlineStart": "8px"}),
                    ],
                    style={"marginBottom": "4px"},
                ),
                html.Div(asset.location, style={"fontSize": ".68rem", "color": MUTED, "marginBottom": "10px"}),
                html.Div(
                    [
                        baseline,
                        mini_kpi(t("bridge.vibration", lang), vibration),
                        mini_kpi(t("nav.alerts", lang), str(len(asset.alerts)), AMBER if asset.alerts else GREEN),
                    ],
                    style={"display": "grid", "gridTemplateColumns": "1fr 1fr 1fr", "gap": "8px"},
                ),
            ],
            style={
                "backgroundColor": CARD_BG,
                "border": f"1px solid {border}",
                "borderRadius": "8px",
                "padding": "14px",
            },
        ),
        md=4,
    )


def _alerts_table(assets: list[Asset], lang: str) -> html.Div | html.Table:
    df = store.alerts_frame(assets)
    if df.empty:
        return html.Div(t("overview.no_alerts", lang), style={"color": MUTED, "padding": "12px"})
    rows = [
        html.Tr([
            html.Td(row["time_formatted"], style={"fontSize": ".72rem", "color": MUTED}),
            html.Td(html.Span(row["asset_name"], style={"color": ACCENT, "fontSize": ".78rem"})),
            html.Td(alert_badge(row["severity"], lang)),
            html.Td(f"{row['vibration']:.4f}", style={"fontSize": ".72rem"}),
            html.Td(f"{row['risk_percent']:.0f}%", style={"fontSize": ".72rem"}),
        ])
        for _, row in df.head(8).iterrows()
    ]
    headers = [t(k, lang) for k in ("table.time", "table.bridge", "table.severity", "table.vibration", "bridge.risk")]
    return html.Table(
        [html.Thead(html.Tr([html.Th(h) for h in headers],
                            style={"color": MUTED, "fontSize": ".65rem", "textTransform": "uppercase"})),
         html.Tbody(rows)],
        style={"width": "100%", "borderCollapse": "collapse", "fontSize": ".8rem"},
    )


def _event_feed(registry: AssetRegistry, lang: str) -> html.Div:
    events = registry.bus.recent(limit=12)
    if not events:
        return html.Div(t("overview.no_events", lang), style={"color": MUTED, "padding": "12px"})
    names = {a.id: a.name for a in registry.snapshot()}
    items = []
    for item in events:
        bridge_id = getattr(item.event, "asset_id", "")
        items.append(html.Div(
            [
                html.Span(item.published_at.strftime("%H:%M:%S"), style={"color": MUTED, "marginInlineEnd": "8px"}),
                html.Span(item.channel, style={"color": ACCENT, "fontFamily": "monospace", "marginInlineEnd": "8px"}),
                html.Span(names.get(bridge_id, bridge_id)),
            ],
            style={"fontSize": ".72rem", "padding": "3px 0", "borderBottom": f"1px solid {BORDER}"},
        ))
    return html.Div(items)


def register(app, registry: AssetRegistry) -> None:
    """Register navigation + overview page callbacks."""

    # ── Page routing ──────────────────────────────────────────────────────────
    from src.pages import alerts, bridge, overview

    @app.callback(
        Output("page-content", "children"),
        Input("url", "pathname"),
        Input("store-lang", "data"),
        State("store-bridge", "data"),
    )
    def display_page(pathname: str, lang: str, bridge_id: str | None):
        lang = normalize_lang(lang)
        if pathname == "/bridges":
            return bridge.layout(registry, lang, bridge_id)
        if pathname == "/alerts":
            return alerts.layout(registry, lang)
        return overview.layout(lang)

    # ── Navbar collapse ───────────────────────────────────────────────────────
    @app.callback(
        Output("navbar-collapse", "is_open"),
        Input("navbar-toggler", "n_clicks"),
        State("navbar-collapse", "is_open"),
        prevent_initial_call=True,
    )
    def toggle_navbar(n_clicks: int, is_open: bool) -> bool:
        return not is_open

    # ── Language toggle ───────────────────────────────────────────────────────
    @app.callback(
        Output("store-lang", "data"),
        Input("lang-en-btn", "n_clicks"),
        Input("lang-ar-btn", "n_clicks"),
        prevent_initial_call=True,
    )
    def update_lang(n_en: int, n_ar: int) -> str:
        return "ar" if ctx.triggered_id == "lang-ar-btn" else "en"

    @app.callback(
        [Output(link_id, "children") for link_id, _, _ in NAV_PAGES]
        + [
            Output("navbar-brand-text", "children"),
            Output("footer-text", "children"),
            Output("app-root", "dir"),
            Output("lang-en-btn", "style"),
            Output("lang-ar-btn", "style"),
        ],
        Input("store-lang", "data"),
    )
    def translate_chrome(lang: str):
        return (
            *[t(key, lang) for _, key, _ in NAV_PAGES],
            t("app.brand", lang),
            t("app.footer", lang),
            text_direction(lang),
            lang_btn_style(lang == "en"),
            lang_btn_style(lang == "ar"),
        )

    # ── Overview: KPI banner, region cards, alerts, events ────────────────────
    @app.callback(
        [
            Output("overview-kpi-banner", "children"),
            Output("overview-region-cards", "children"),
            Output("overview-alerts-table", "children"),
            Output("overview-event-feed", "children"),
        ],
        Input("interval-live", "n_intervals"),
        Input("store-lang", "data"),
    )
    def update_overview(n_intervals: int, lang: str):
        regions = sorted(registry.regions(), key=lambda r: r.name)
        assets = registry.snapshot()
        online = sum(1 for a in assets if a.connectivity is ConnectivityState.ONLINE)
        retained = sum(len(a.alerts) for a in assets)
        critical = sum(1 for a in assets for al in a.alerts if al.severity is AlertSeverity.CRITICAL)

        kpi_banner = dbc.Row(
            [
                dbc.Col(kpi_card(t("overview.regions", lang), str(len(regions)), ACCENT), xs=6, md=True),
                dbc.Col(kpi_card(t("overview.bridges", lang), str(len(assets)), ACCENT), xs=6, md=True),
                dbc.Col(
                    kpi_card(
                        t("overview.online", lang),
                        f"{online}/{len(assets)}",
                        GREEN if assets and online == len(assets) else AMBER,
                        progress=100.0 * online / len(assets) if assets else 0.0,
                    ),
                    xs=6, md=True,
                ),
                dbc.Col(kpi_card(t("overview.active_alerts", lang), str(retained), AMBER if retained else GREEN), xs=6, md=True),
                dbc.Col(
                    kpi_card(
                        t("overview.critical_alerts", lang),
                        str(critical),
                        RED if critical else GREEN,
                        border_color=RED if critical else BORDER,
                    ),
                    xs=6, md=True,
                ),
            ],
            className="g-3",
        )

        sections = []
        for region in regions:
            members = sorted((a for a in assets if a.region_id == region.id), key=lambda a: a.name)
            cards = (
                dbc.Row([_bridge_card(a, lang) for a in members], className="g-3")
                if members
                else html.Div(t("overview.no_bridges", lang), style={"color": MUTED, "fontSize": ".8rem"})
            )
            sections.append(html.Div(
                [html.Div(region.name, className="chart-title"), cards],
                className="mb-3",
            ))

        return kpi_banner, html.Div(sections), _alerts_table(assets, lang), _event_feed(registry, lang)
