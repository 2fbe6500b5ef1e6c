"""
Run the dispatch simulator on the default city.

Calls are replayed from a CSV (columns: minute, caller, location, disease, age)
or, without one, drawn at random.
"""

import argparse

import numpy as np
import pandas as pd

from ems_dispatch.city import default_city
from ems_dispatch.exceptions import DispatchError
from ems_dispatch.priority import Disease
from ems_dispatch.simulator import DispatchSimulator

CALL_COLUMNS = ["minute", "caller", "location", "disease", "age"]


def synthetic_calls(num_calls: int, num_locations: int, horizon: int, seed=None) -> pd.DataFrame:
    rng = np.random.default_rng(seed)
    return pd.DataFrame({
        "minute": np.sort(rng.integers(0, horizon, num_calls)),
        "caller": [f"Caller {i + 1}" for i in range(num_calls)],
        "location": rng.integers(0, num_locations, num_calls),
        "disease": rng.choice([d.name for d in Disease], num_calls),
        "age": rng.integers(1, 95, num_calls),
    })


def replay_calls(simulator: DispatchSimulator, call_data: pd.DataFrame) -> None:
    """ Report each call at its minute, advancing the clock in between. """
    for _, row in call_data.sort_values("minute", kind="stable").iterrows():
        minute = int(row["minute"])
        if minute > simulator.current_time:
            simulator.advance_time(minute - simulator.current_time)
        try:
            simulator.report_emergency(
                str(row["caller"]), int(row["location"]), row["disease"], int(row["age"])
            )
        except DispatchError as exc:
            print(f"⚠️  [Time {simulator.current_time}] Call from {row['caller']} rejected: {exc}")


def parse_args(argv=None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("--minutes", type=int, default=120, help="simulated minutes to run")
    parser.add_argument("--calls", help="CSV call schedule to replay")
    parser.add_argument("--num-calls", type=int, default=10, help="random calls when no CSV is given")
    parser.add_argument("--seed", type=int, default=None)
    parser.add_argument("--verbose", action="store_true")
    return parser.parse_args(argv)


def run_simulation(args: argparse.Namespace) -> DispatchSimulator:
    city = default_city()

    if args.calls:
        call_data = pd.read_csv(args.calls)
        missing = set(CALL_COLUMNS) - set(call_data.columns)
        if missing:
            raise SystemExit(f"{args.calls} is missing columns: {', '.join(sorted(missing))}")
    else:
        call_data = synthetic_calls(args.num_calls, len(city["locations"]), args.minutes, args.seed)

    simulator = DispatchSimulator.from_config(city, seed=args.seed, verbose=args.verbose)

    print("\n===== Running Dispatch Simulator =====")
    print(f"Ambulances: {len(simulator.fleet)} | Hospitals: {len(simulator.registry)} "
          f"| Calls: {len(call_data)}")

    replay_calls(simulator, call_data[call_data["minute"] < args.minutes])
    if args.minutes > simulator.current_time:
        simulator.advance_time(args.minutes - simulator.current_time)

    stats = simulator.statistics()
    print("\n===== Final Statistics =====")
    print(f"Current time: {stats['current_time']} minutes")
    print(f"Emergencies handled: {stats['handled']}")
    print(f"Active / pending: {stats['active']} / {stats['pending']}")
    if stats["handled"]:
        print(f"Average response time: {stats['average_response_time']:.1f} minutes")
    print(f"Available ambulances: {stats['idle_ambulances']}/{stats['total_ambulances']}")
    print(f"Hospital bed usage: {stats['used_beds']}/{stats['total_beds']}")
    print(f"Re-queued dispatches: {stats['requeued']} | Reassignments: {stats['reassignments']}")

    deliveries = simulator.deliveries_frame()
    if not deliveries.empty:
        print("\nDeliveries per hospital:")
        print(deliveries.groupby("hospital")["emergency_id"].count().to_string())
    return simulator


def main(argv=None) -> None:
    run_simulation(parse_args(argv))


if __name__ == "__main__":
    main()
