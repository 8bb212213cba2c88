import logging
from datetime import datetime
from pathlib import Path
from typing import Annotated, Optional

import typer

from .config.settings import Config, ConfigurationError
from .config_loader import load_presentation
from .coordinates import (
    FixedPointCoordinate,
    GeoCoordinate,
    degrees_lat_to_fixed,
    degrees_lon_to_fixed,
)
from .domain.enums import ExportFormat
from .errors import PipelineError
from .pipeline.build import DocumentBuilder
from .pipeline.decode import TileDecoder
from .pipeline.export import Exporter
from .pipeline.extract import extract
from .pipeline.source import TileSource
from .utils import setup_logging, stage

app = typer.Typer(help="NDS.live lane geometry pipeline: Fetch -> Decode -> Extract -> Build -> Export")


def _banner(title: str, level: int = logging.INFO) -> None:
    logging.log(level, "=" * 50)
    logging.log(level, title)
    logging.log(level, "=" * 50)


def process_tile(
    tile_id: Optional[str] = None,
    output_path: Optional[Path] = None,
    export_format: Optional[ExportFormat] = None,
    presentation_path: Optional[Path] = None,
    env_file: Optional[Path] = None,
    verbose: bool = False,
    log_to_file: bool = False,
) -> Path:
    """
    Convert one tile into a visual document.

    Stages run strictly in order and any failure aborts the run before the
    output file is touched.

    Args:
        tile_id: Tile to convert (defaults to NDS_TILE_ID)
        output_path: Output file (defaults to NDS_OUTPUT_FILE)
        export_format: Output format (inferred from extension if omitted)
        presentation_path: Presentation YAML (defaults to packaged file)
        env_file: Explicit environment file
        verbose: Enable detailed logging output
        log_to_file: Create timestamped log files

    Returns:
        Path of the written document

    Raises:
        ConfigurationError: If settings are missing or invalid
        PipelineError: If fetch, decode, extract, convert or write fails
    """
    setup_logging(verbose, tile_id, log_to_file)

    config = Config(env_file=env_file)
    tile_id = tile_id or config.run.tile_id
    output_path = Path(output_path) if output_path else config.run.output_file
    presentation = load_presentation(presentation_path)

    start_time = datetime.now()
    logging.info(f"Initiating conversion of tile {tile_id}")
    logging.info(f"Execution timestamp: {start_time}")
    logging.debug(f"Run configuration: {config.get_run_summary()}")
    logging.info(f"Output file: {output_path}")

    try:
        _banner("TILE ACQUISITION PHASE")
        with stage("fetch"), TileSource(config.service) as source:
            payload = source.fetch(tile_id)

        with stage("decode"):
            decoder = TileDecoder.from_config(config.decoder)
            tile = decoder.decode(tile_id, payload)

        _banner("GEOMETRY CONVERSION PHASE")
        with stage("extract"):
            groups = extract(tile.lane_geometry_layer)

        with stage("convert"):
            document = DocumentBuilder(presentation).build(groups)

        _banner("DOCUMENT EXPORT PHASE")
        with stage("write"):
            written = Exporter(output_path, export_format).write(document)

    except PipelineError as e:
        _banner("CONVERSION FAILED", logging.ERROR)
        logging.error(f"Failed stage: {e.stage}")
        logging.error(f"Execution time: {datetime.now() - start_time}")
        logging.error(f"Error type: {type(e).__name__}")
        logging.error(f"Error message: {e}")
        logging.error("No output file was written")
        raise

    _banner("CONVERSION COMPLETED")
    logging.info(f"Total execution time: {datetime.now() - start_time}")
    logging.info(f"Groups: {len(document.groups)}, paths: {document.path_count:,}, "
                 f"coordinates: {document.coordinate_count:,}")
    return written


@app.command("convert")
def convert(
    tile_id: Annotated[Optional[str], typer.Option("--tile-id", "-t", help="Tile identifier (defaults to NDS_TILE_ID)")] = None,
    output: Annotated[Optional[Path], typer.Option("--output", "-o", help="Output file (defaults to NDS_OUTPUT_FILE)")] = None,
    format: Annotated[Optional[ExportFormat], typer.Option("--format", "-f", help="Output format: kml, geojson, gpkg (inferred from extension if omitted)")] = None,
    presentation: Annotated[Optional[Path], typer.Option("--presentation", "-p", help="Presentation YAML with document name, labels and styles")] = None,
    env_file: Annotated[Optional[Path], typer.Option("--env-file", help="Explicit .env file")] = None,
    verbose: Annotated[bool, typer.Option("--verbose", "-v", help="Enable detailed logging output")] = False,
    log_to_file: Annotated[bool, typer.Option("--log-to-file", help="Create timestamped log files")] = False,
):
    """Fetch one tile and write its lane center and boundary lines as a styled document."""
    try:
        written = process_tile(
            tile_id=tile_id,
            output_path=output,
            export_format=format,
            presentation_path=presentation,
            env_file=env_file,
            verbose=verbose,
            log_to_file=log_to_file,
        )
    except (ConfigurationError, FileNotFoundError) as e:
        logging.error(f"Configuration error: {e}")
        raise typer.Exit(1) from e
    except PipelineError as e:
        typer.echo(f"Processing failed during {e.stage}: {e}", err=True)
        raise typer.Exit(1) from e

    typer.echo(f"Processing finished successfully: {written}")


@app.command("coords")
def coords(
    lon: Annotated[float, typer.Argument(help="Longitude (degrees, or NDS units with --fixed). Use '--' before negative values.")],
    lat: Annotated[float, typer.Argument(help="Latitude (degrees, or NDS units with --fixed)")],
    fixed: Annotated[bool, typer.Option("--fixed", help="Inputs are NDS fixed-point values")] = False,
):
    """Convert a single coordinate between WGS84 degrees and NDS fixed-point units."""
    try:
        if fixed:
            if not (lon.is_integer() and lat.is_integer()):
                raise typer.BadParameter("fixed-point values must be integers")
            geo = FixedPointCoordinate(lon=int(lon), lat=int(lat)).to_geo()
            typer.echo(f"lon={geo.lon:.9f} lat={geo.lat:.9f}")
        else:
            GeoCoordinate(lon=lon, lat=lat)
            typer.echo(f"lon={degrees_lon_to_fixed(lon)} lat={degrees_lat_to_fixed(lat)}")
    except PipelineError as e:
        typer.echo(f"Invalid coordinate: {e}", err=True)
        raise typer.Exit(1) from e


@app.command("version")
def version():
    """Display version information."""
    from . import __version__
    typer.echo(f"nds2kml version: {__version__}")


if __name__ == "__main__":
    app()
