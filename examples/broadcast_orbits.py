#!/usr/bin/env python3
"""
Satellite positions and clocks from a RINEX 3 navigation file

This example demonstrates:
1. Reading a RINEX 3 navigation file into a record store
2. Computing satellite position and clock bias at an epoch
3. Computing a table of states for all satellites over a time span
4. Loading settings and logger levels from a YAML/JSON file
"""

import argparse
from datetime import datetime
from pathlib import Path

import numpy as np

from pysateph.config import NavConfig, load_config
from pysateph.core.errors import NavigationError
from pysateph.core.time import GNSSTime
from pysateph.io.rinex import read_nav
from pysateph.logger import setup_logger, setup_logger_from_config
from pysateph.satellite.batch import compute_states
from pysateph.satellite.ephemeris import EphemerisManager
from pysateph.satellite.propagator import compute_satellite_state


def print_epoch(manager, epoch, config):
    """Print position, radius and clock of every satellite at epoch"""
    print(f"\nSatellite states at {epoch.to_datetime()} ({epoch})")
    print(f"{'SAT':<5}{'X (km)':>15}{'Y (km)':>15}{'Z (km)':>15}{'R (km)':>12}{'dts (us)':>12}")

    # Only satellites whose records are in the epoch's time scale are found
    for system, prn in manager.satellites():
        record = manager.get_record(system, prn, epoch)
        if record is None:
            continue
        try:
            rs, dts = compute_satellite_state(record, epoch, config)
        except NavigationError as e:
            print(f"{record.sat_id:<5}failed: {e}")
            continue
        print(f"{record.sat_id:<5}{rs[0] / 1e3:15.3f}{rs[1] / 1e3:15.3f}{rs[2] / 1e3:15.3f}"
              f"{np.linalg.norm(rs) / 1e3:12.3f}{dts * 1e6:12.3f}")


def main():
    parser = argparse.ArgumentParser(description='Compute satellite states from broadcast ephemeris')
    parser.add_argument('nav', help='RINEX 3 navigation file')
    parser.add_argument('--time', help='Epoch as YYYY-MM-DDTHH:MM:SS (default: first record)')
    parser.add_argument('--system', default='GPS', help="Time scale of --time (GPS, GAL, BDS, IRN, UTC)")
    parser.add_argument('--span', type=float, default=3600.0, help='Batch time span (s)')
    parser.add_argument('--interval', type=float, default=300.0, help='Batch interval (s)')
    parser.add_argument('--config', help='YAML or JSON settings file')
    parser.add_argument('--output', help='CSV file for the batch table')
    args = parser.parse_args()

    config = load_config(args.config) if args.config else NavConfig()
    if config.logging:
        setup_logger_from_config(config.logging)
    else:
        setup_logger(level='INFO')

    if not Path(args.nav).exists():
        print(f"Error: Navigation file not found: {args.nav}")
        return

    manager = EphemerisManager()
    manager.add_records(read_nav(args.nav))
    if not len(manager):
        print("No navigation records found")
        return

    if args.time:
        epoch = GNSSTime.from_datetime(datetime.fromisoformat(args.time), args.system)
    else:
        first = min((r for records in manager.records.values() for r in records
                     if r.toc.time_sys == args.system.upper()),
                    key=lambda r: r.toc, default=None)
        if first is None:
            print(f"No records in {args.system} time")
            return
        epoch = first.toc

    print_epoch(manager, epoch, config)

    n_epochs = int(args.span // args.interval) + 1
    epochs = [epoch + i * args.interval for i in range(n_epochs)]
    df = compute_states(manager, epochs, config)
    df = df[df['status'] != 'no_ephemeris']

    print("\n" + "=" * 60)
    print("BATCH SUMMARY")
    print("=" * 60)
    print(f"Epochs: {n_epochs}, rows: {len(df)}")
    print(df.groupby('status').size().to_string())

    if args.output:
        df.to_csv(args.output, index=False)
        print(f"Table written to {args.output}")


if __name__ == '__main__':
    main()
