# SPDX-License-Identifier: GPL-3.0-or-later
# Copyright (C) 2024-2026 petbmi Team

"""
petbmi command-line runner.

Subcommands:
    run:  Initialize a model from a configuration file, step it
          ``num_timesteps`` times and write the PET series to CSV, or to
          NetCDF when the output path ends in ``.nc``.
    info: Print the model's BMI variables.

The ``main()`` function is the target of the ``petbmi`` console script.
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

import numpy as np
import pandas as pd
import xarray as xr

from petbmi.bmi.bmi_pet import BmiPET
from petbmi.core.constants import UnitConversion
from petbmi.core.exceptions import ConfigurationError, PETBMIError
from petbmi.core.logging_config import setup_logging

try:
    from petbmi.petbmi_version import __version__
except ImportError:
    __version__ = "0+unknown"

logger = logging.getLogger(__name__)

PET_OUTPUT_NAME = 'water_potential_evaporation_flux'


def run_model(config_file: str, include_forcing: bool = False) -> pd.DataFrame:
    """Run a model over its configured number of steps.

    Args:
        config_file: Path of the ``key=value`` configuration file
        include_forcing: Append the ingested forcing records as extra columns

    Returns:
        One row per step indexed by the UTC start time of the step, with the
        PET rate (m s-1), the rate in mm h-1 and the depth over the step (m).
    """
    model = BmiPET()
    model.initialize(config_file)
    try:
        if model.forcing is None:
            raise ConfigurationError(
                f"'{config_file}' expects forcing through set_value; "
                "the runner needs a forcing_file path"
            )
        num_timesteps = model.parameters.num_timesteps
        dt = model.get_time_step()
        forcing = model.forcing.to_dataframe() if include_forcing else None
        times = np.empty(num_timesteps, dtype=np.float64)
        pet = np.empty(num_timesteps, dtype=np.float64)
        buffer = np.empty(1, dtype=np.float64)

        for i in range(num_timesteps):
            times[i] = model.get_current_time()
            model.update()
            pet[i] = model.get_value(PET_OUTPUT_NAME, buffer)[0]
    finally:
        model.finalize()

    index = pd.Index(pd.to_datetime(times, unit='s', utc=True), name='time')
    results = pd.DataFrame(
        {
            'pet_m_per_s': pet,
            'pet_mm_per_h': pet * UnitConversion.M_PER_S_TO_MM_PER_HOUR,
            'pet_m_per_step': pet * dt,
        },
        index=index,
    )
    if forcing is not None:
        # Step i uses record i, whatever timestamp the file gives it
        forcing = forcing.iloc[:num_timesteps].set_axis(index, axis=0)
        results = pd.concat([results, forcing], axis=1)
    return results


def write_results(results: pd.DataFrame, output: Path) -> None:
    """Write results to CSV, or to NetCDF for a ``.nc`` suffix."""
    output.parent.mkdir(parents=True, exist_ok=True)
    if output.suffix.lower() == '.nc':
        ds = xr.Dataset.from_dataframe(results.tz_convert(None))
        ds['pet_m_per_s'].attrs.update(units='m s-1', long_name='potential evapotranspiration rate')
        ds['pet_mm_per_h'].attrs.update(units='mm h-1', long_name='potential evapotranspiration rate')
        ds['pet_m_per_step'].attrs.update(units='m', long_name='potential evapotranspiration depth per step')
        ds.attrs['source'] = f'petbmi {__version__}'
        ds.to_netcdf(output)
    else:
        results.to_csv(output)
    logger.info(f"Wrote {len(results)} steps to {output}")


def _cmd_run(args: argparse.Namespace) -> int:
    results = run_model(args.config, include_forcing=args.with_forcing)
    if args.output:
        write_results(results, Path(args.output))
    else:
        results.to_csv(sys.stdout)
    return 0


def _cmd_info(args: argparse.Namespace) -> int:
    model = BmiPET()
    rows = []
    for role, names in (('input', model.get_input_var_names()),
                        ('output', model.get_output_var_names())):
        for name in names:
            rows.append({
                'role': role,
                'name': name,
                'type': model.get_var_type(name),
                'units': model.get_var_units(name),
                'grid': model.get_var_grid(name),
                'location': model.get_var_location(name),
                'nbytes': model.get_var_nbytes(name),
            })
    print(model.get_component_name())
    print(pd.DataFrame(rows).to_string(index=False))
    return 0


def create_parser() -> argparse.ArgumentParser:
    """Build the argument parser with the ``run`` and ``info`` subcommands."""
    common = argparse.ArgumentParser(add_help=False)
    common.add_argument('--log-level', default='INFO',
                        choices=['DEBUG', 'INFO', 'WARNING', 'ERROR'],
                        help='Logging level (default: INFO)')

    parser = argparse.ArgumentParser(
        prog='petbmi',
        description='Single-point potential evapotranspiration model behind BMI',
    )
    parser.add_argument('--version', action='version', version=f'%(prog)s {__version__}')
    subparsers = parser.add_subparsers(dest='command', required=True)

    run_parser = subparsers.add_parser('run', parents=[common],
                                       help='Run a model from a configuration file')
    run_parser.add_argument('config', help='Path to the key=value configuration file')
    run_parser.add_argument('-o', '--output',
                            help='Output file (.csv, or .nc for NetCDF); stdout if omitted')
    run_parser.add_argument('--with-forcing', action='store_true',
                            help='Also write the forcing record of each step')
    run_parser.set_defaults(func=_cmd_run)

    info_parser = subparsers.add_parser('info', parents=[common],
                                        help='List the BMI input and output variables')
    info_parser.set_defaults(func=_cmd_info)

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Entry point for the ``petbmi`` command."""
    parser = create_parser()
    args = parser.parse_args(argv)
    setup_logging(args.log_level)

    try:
        return args.func(args)
    except KeyboardInterrupt:
        print("\nInterrupted by user", file=sys.stderr)
        return 130
    except PETBMIError as e:
        logger.error(f"{type(e).__name__}: {e}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
