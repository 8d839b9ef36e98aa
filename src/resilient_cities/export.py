from dataclasses import asdict, fields
from pathlib import Path

import geopandas as gpd
import pandas as pd
from loguru import logger

from .analytics import AnalyticsSummary
from .buildings import Building
from .flood import FloodPoint
from .temperature import TemperaturePoint

COLUMNS = {
    "temperature": [f.name for f in fields(TemperaturePoint)],
    "flood": [f.name for f in fields(FloodPoint)],
    "buildings": [f.name for f in fields(Building)],
}


def layer_to_gdf(points, layer: str) -> gpd.GeoDataFrame:
    """Points of one layer as a WGS84 GeoDataFrame (attribute columns + point geometry)."""
    if layer not in COLUMNS:
        raise ValueError(f"Unknown layer {layer!r}; expected one of {sorted(COLUMNS)}")
    df = pd.DataFrame([asdict(p) for p in points], columns=COLUMNS[layer])
    if layer == "buildings":
        df["building_type"] = df["building_type"].map(lambda t: getattr(t, "value", t))
    geometry = gpd.points_from_xy(df["lng"], df["lat"], crs=4326)
    return gpd.GeoDataFrame(df, geometry=geometry, crs=4326)


def summary_frame(summary: AnalyticsSummary) -> pd.DataFrame:
    return pd.DataFrame([asdict(summary)])


def write_dataset(dataset, summary: AnalyticsSummary, out_dir) -> list[Path]:
    """Write each layer as GeoJSON plus a one-row summary CSV. Returns the written paths."""
    out = Path(out_dir)
    out.mkdir(parents=True, exist_ok=True)
    written = []
    for layer in ("temperature", "flood", "buildings"):
        path = out / f"{layer}.geojson"
        gdf = layer_to_gdf(getattr(dataset, layer), layer)
        # to_file refuses an empty frame; write the empty collection directly
        if gdf.empty:
            path.write_text(gdf.to_json(), encoding="utf-8")
        else:
            gdf.to_file(path, driver="GeoJSON")
        written.append(path)
        logger.debug(f"wrote {path} ({len(gdf)} features)")

    csvp = out / "summary.csv"
    summary_frame(summary).to_csv(csvp, index=False)
    written.append(csvp)
    return written
