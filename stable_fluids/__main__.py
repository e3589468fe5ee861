"""
Run a Stable Fluids simulation from the command line

    python -m stable_fluids --preset reference --output-dir output
    python -m stable_fluids --config run.yaml --plot
"""

import argparse
import logging
import sys
from pathlib import Path

import matplotlib.pyplot as plt

from .core.config import SimulationConfig, available_presets, get_preset, load_config
from .core.errors import ConfigurationError, StableFluidsError
from .output.sinks import SinkGroup, VTKSeriesWriter
from .physics.stable_fluids_3d import StableFluidsSolver3D
from .utils.logging import setup_logging
from .visualization.diagnostics import DiagnosticPlotter

logger = logging.getLogger('stable_fluids')


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog='stable_fluids',
        description='3D periodic Stable Fluids simulation with FFT diffusion and projection',
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    source = parser.add_mutually_exclusive_group()
    source.add_argument('--config', type=Path, help='YAML configuration file')
    source.add_argument('--preset', choices=available_presets(), default=None,
                        help='Named parameter set (default: reference)')
    parser.add_argument('--steps', type=int, default=None, help='Override the number of time steps')
    parser.add_argument('--output-dir', type=Path, default=None, help='Override the output directory')
    parser.add_argument('--no-vtk', action='store_true', help='Do not write VTK snapshots')
    parser.add_argument('--plot', action='store_true',
                        help='Save diagnostic plots and JSON history to the output directory')
    parser.add_argument('--log-level', default='INFO', help='Logging level (default: INFO)')
    parser.add_argument('--log-file', type=Path, default=None, help='Also log to this file')
    parser.add_argument('--no-progress', action='store_true', help='Hide the progress bar')
    return parser


def resolve_config(args: argparse.Namespace) -> SimulationConfig:
    if args.config is not None:
        config = load_config(args.config)
    else:
        config = get_preset(args.preset or 'reference')
    if args.steps is not None:
        config.n_time_steps = args.steps
    if args.output_dir is not None:
        config.output.directory = str(args.output_dir)
    if args.no_vtk:
        config.output.write_vtk = False
    return config.validate()


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)
    setup_logging(args.log_level, args.log_file)

    try:
        config = resolve_config(args)
        solver = StableFluidsSolver3D(config)
    except ConfigurationError as exc:
        logger.error(f"Invalid configuration: {exc}")
        return 2

    sinks = []
    output_dir = Path(config.output.directory)
    if config.output.write_vtk:
        sinks.append(VTKSeriesWriter(
            solver.grid, output_dir, config.output.basename, config.output.collection
        ))
    diagnostics = None
    if args.plot:
        diagnostics = DiagnosticPlotter(solver.grid, solver.spectral_solver)
        sinks.append(diagnostics)

    try:
        solver.run(SinkGroup(*sinks), progress=not args.no_progress)
    except StableFluidsError as exc:
        logger.error(f"Simulation aborted: {exc}")
        return 1

    if diagnostics is not None:
        output_dir.mkdir(parents=True, exist_ok=True)
        fig = diagnostics.plot_time_series()
        fig.savefig(output_dir / 'diagnostics.png', dpi=150)
        plt.close(fig)
        diagnostics.save_diagnostics(str(output_dir / 'diagnostics.json'))
        logger.info(f"Diagnostics saved to {output_dir}")

    return 0


if __name__ == '__main__':
    sys.exit(main())
