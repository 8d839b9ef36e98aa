import colorsys

import folium
from branca.element import MacroElement, Template

from .viewport import BoundingBox, Coordinate

MAX_MARKERS = 500  # per layer; a default viewport has ~290 flood cells


def _clamp01(v):
    return max(0.0, min(1.0, float(v)))


def _hue_to_hex(hue_deg, s=0.8, v=0.9):
    r, g, b = colorsys.hsv_to_rgb((hue_deg % 360) / 360.0, s, v)
    return f"#{int(r*255):02x}{int(g*255):02x}{int(b*255):02x}"


def temperature_color(temp):
    """Blue (10 °C and below) → red (35 °C and above)."""
    intensity = _clamp01((temp - 10) / 25)
    return _hue_to_hex(240 - intensity * 240)


def efficiency_color(efficiency):
    """Red (inefficient) → green (efficient)."""
    return _hue_to_hex(_clamp01(efficiency) * 120)


def flood_radius(risk):
    return 8 + _clamp01(risk) * 12


def _temperature_markers(points, fg):
    for p in points[:MAX_MARKERS]:
        folium.CircleMarker(
            [p.lat, p.lng], radius=5, color=temperature_color(p.temperature),
            fill=True, fill_opacity=0.8, weight=1,
            tooltip=f"Temperature: {p.temperature:.1f}°C<br>Heat index: {p.heat_index:.1f}°C",
        ).add_to(fg)


def _building_markers(buildings, fg):
    for b in buildings[:MAX_MARKERS]:
        folium.CircleMarker(
            [b.lat, b.lng], radius=max(3, b.height / 20), color="#333",
            fill=True, fill_color=efficiency_color(b.energy_efficiency), fill_opacity=0.9, weight=1,
            tooltip=(
                f"Building #{b.id}: {b.height:.0f}m {b.building_type.value}<br>"
                f"Efficiency {b.energy_efficiency * 100:.0f}% · built {b.year_built}<br>"
                f"Carbon {b.carbon_footprint:.1f}t"
            ),
        ).add_to(fg)


def _flood_markers(points, fg):
    for p in points[:MAX_MARKERS]:
        folium.CircleMarker(
            [p.lat, p.lng], radius=flood_radius(p.flood_risk) / 2, color="#1d4ed8",
            fill=True, fill_opacity=0.25 + 0.5 * p.flood_risk, weight=0,
            tooltip=f"Flood risk: {p.flood_risk * 100:.0f}%<br>Elevation: {p.elevation:.1f}m",
        ).add_to(fg)


LAYER_STYLES = {
    "temperature": ("Temperature", _temperature_markers),
    "buildings": ("Buildings", _building_markers),
    "flood": ("Flood Risk", _flood_markers),
}

LEGENDS = {
    "temperature": ("Temperature (°C)", [temperature_color(10 + i * 2.5) for i in range(11)], "10", "35"),
    "buildings": ("Energy efficiency", [efficiency_color(i / 10) for i in range(11)], "0%", "100%"),
    "flood": ("Flood risk", ["#dbeafe", "#1d4ed8"], "Low", "High"),
}


def legend_macro(layer):
    title, colors, lo, hi = LEGENDS[layer]
    stops = ", ".join(colors)
    legend_html = f"""
{{% macro html(this, kwargs) %}}
<div style="position: fixed; bottom: 40px; left: 20px; z-index: 9999;
            background: white; padding: 10px 12px; border: 1px solid #999; border-radius: 8px;">
  <b>{title}</b>
  <div style="width:220px; height:12px; background: linear-gradient(to right, {stops}); margin:6px 0;"></div>
  <div style="display:flex; justify-content:space-between; font-size:12px;">
    <span>{lo}</span><span>{hi}</span>
  </div>
</div>
{{% endmacro %}}
"""
    macro = MacroElement()
    macro._template = Template(legend_html)
    return macro


def build_map(dataset, center: Coordinate, layer: str = "temperature", zoom: int = 12,
              bounds: BoundingBox | None = None) -> folium.Map:
    """Folium map of one data layer; view state is passed in, nothing is kept here."""
    if layer not in LAYER_STYLES:
        raise ValueError(f"Unknown layer {layer!r}; expected one of {sorted(LAYER_STYLES)}")

    m = folium.Map(location=[center.lat, center.lng], zoom_start=zoom, tiles="cartodbpositron")
    if bounds is not None:
        folium.Rectangle(
            [[bounds.south, bounds.west], [bounds.north, bounds.east]],
            color="#555", weight=1, fill=False,
        ).add_to(m)

    name, add_markers = LAYER_STYLES[layer]
    fg = folium.FeatureGroup(name=name)
    add_markers(getattr(dataset, layer), fg)
    fg.add_to(m)

    m.get_root().add_child(legend_macro(layer))
    folium.LayerControl(collapsed=False).add_to(m)
    return m
