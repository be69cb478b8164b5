"""Compute a force-directed layout headlessly and report how it settled.

This script:
1. Loads a graph payload from Neo4j, a remote /api/graph endpoint or a JSON file
2. Seeds positions on a jittered grid
3. Runs the force simulation for a fixed number of ticks (no clock)
4. Prints the bounding box and kinetic energy, optionally writes positions

Usage:
    uv run python scripts/compute_layout.py --ticks 600
    uv run python scripts/compute_layout.py --query "MATCH (n)-[r]->(m) RETURN n,r,m LIMIT 50"
    uv run python scripts/compute_layout.py --file graph.json --output positions.json
    uv run python scripts/compute_layout.py --url http://localhost:8000 --seed 42
"""

import argparse
import asyncio
import json
import logging
import random
import sys
from pathlib import Path

from dotenv import load_dotenv

# Load .env file from project root
project_root = Path(__file__).parent.parent
load_dotenv(project_root / ".env")

# Add src to path
sys.path.insert(0, str(project_root / "src"))

from forcegraph.config import settings
from forcegraph.layout import ForceSimulation, LayoutConfig
from forcegraph.models import GraphPayload
from forcegraph.storage import GraphSourceError, HttpGraphSource, Neo4jClient

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


async def load_payload(args: argparse.Namespace) -> GraphPayload:
    """Fetch the payload from the selected source."""
    if args.file:
        print(f"Reading payload from {args.file}...")
        with open(args.file, encoding="utf-8") as f:
            return GraphPayload.from_dict(json.load(f))

    if args.url:
        source = HttpGraphSource(base_url=args.url)
    else:
        source = Neo4jClient()

    try:
        if args.query:
            print("Running query...")
            return await source.run_graph_query(args.query)
        print("Fetching default graph...")
        return await source.fetch_default_graph()
    finally:
        await source.close()


def positive_int(value: str) -> int:
    """argparse type for counts that must be at least 1."""
    number = int(value)
    if number < 1:
        raise argparse.ArgumentTypeError(f"must be at least 1, got {number}")
    return number


def report(simulation: ForceSimulation) -> None:
    """Print bounding box and energy of the current layout."""
    nodes = simulation.nodes
    if not nodes:
        return
    xs = [n.x for n in nodes]
    ys = [n.y for n in nodes]
    print(
        f"  tick {simulation.tick_count}: "
        f"x=[{min(xs):.1f}, {max(xs):.1f}], y=[{min(ys):.1f}, {max(ys):.1f}], "
        f"energy={simulation.kinetic_energy():.4f}"
    )


async def main(args: argparse.Namespace) -> int:
    try:
        payload = await load_payload(args)
    except (GraphSourceError, OSError, ValueError) as e:
        logger.error(f"Could not load graph: {e}")
        return 1

    print(f"Found {len(payload.nodes)} nodes, {len(payload.links)} links")
    if payload.is_empty:
        print("No nodes, nothing to lay out.")
        return 0

    config = LayoutConfig.from_settings(settings)
    rng = random.Random(args.seed) if args.seed is not None else None
    simulation = ForceSimulation.from_payload(payload, config, rng=rng)
    print(f"Resolved {len(simulation.state.links)} links")

    print(f"Simulating {args.ticks} ticks...")
    report(simulation)
    remaining = args.ticks
    while remaining > 0:
        batch = min(args.report_every, remaining)
        simulation.tick(batch)
        remaining -= batch
        report(simulation)

    if args.output:
        positions = [
            {"id": node.id, "label": node.label, "x": node.x, "y": node.y}
            for node in simulation.nodes
        ]
        with open(args.output, "w", encoding="utf-8") as f:
            json.dump({"nodes": positions}, f, indent=2, ensure_ascii=False)
        print(f"Positions written to {args.output}")

    print("Done!")
    return 0


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Headless force-directed layout")
    source = parser.add_mutually_exclusive_group()
    source.add_argument("--file", help="JSON payload file ({nodes, links})")
    source.add_argument("--url", help="Base URL of a server exposing /api/graph")
    parser.add_argument("--query", help="Free-form query instead of the default graph")
    parser.add_argument("--ticks", type=int, default=600, help="Ticks to simulate")
    parser.add_argument("--report-every", type=positive_int, default=100, help="Ticks between reports")
    parser.add_argument("--seed", type=int, default=None, help="Seed for the initial jitter")
    parser.add_argument("--output", help="Write final positions to this JSON file")

    sys.exit(asyncio.run(main(parser.parse_args())))
