"""
Main simulation script for running roller derby bouts.

Provides CLI interface and batch simulation capabilities.
"""

import argparse
import logging
import os
import sys
import time
from typing import Any, Dict, List, Optional

from derby_sim.engine.match import MatchEngine
from derby_sim.engine.official import Official
from derby_sim.engine.team import GameTeam


def print_team(team: GameTeam) -> None:
    """Print a team and its roster."""
    print(f"{team.name} - {team.details.color}")
    for skater in team.roster:
        details = skater.details
        print(f"  {details.name} ({details.number}) - {details.favored_position.value}")


def print_officials(officials: List[Official]) -> None:
    for official in officials:
        head = " (Head)" if official.is_head else ""
        print(f"  {official.name} - {official.role.value}{head}")


def simulate_single_bout(random_seed: Optional[int] = None, verbose: bool = True) -> Dict[str, Any]:
    """
    Simulate a single roller derby bout.

    Args:
        random_seed: Random seed for reproducibility
        verbose: Print detailed output

    Returns:
        Dict containing bout results and statistics
    """
    if verbose:
        print(f"Setting up bout with seed: {random_seed}")

    engine = MatchEngine.random(random_seed=random_seed)

    if verbose:
        print("\nHome")
        print("----")
        print_team(engine.match.home_team)
        print("\nAway")
        print("----")
        print_team(engine.match.away_team)
        print("\nOfficials")
        print("---------")
        print_officials(engine.match.officials)
        print()

    start_time = time.time()
    bout_result = engine.simulate_match()
    simulation_time = time.time() - start_time

    if verbose:
        print(f"Simulation completed in {simulation_time:.2f} seconds")
        print_bout_summary(bout_result)

    return {
        **bout_result,
        "simulation_time_seconds": simulation_time,
        "engine": engine  # For log export
    }


def simulate_bouts(n_bouts: int = 1,
                   random_seed: Optional[int] = None,
                   out_dir: str = "logs",
                   verbose: bool = True) -> List[Dict[str, Any]]:
    """
    Simulate multiple bouts and export their play-by-play.

    Args:
        n_bouts: Number of bouts to simulate
        random_seed: Base random seed
        out_dir: Output directory for logs
        verbose: Print detailed output

    Returns:
        List of bout results
    """
    if verbose:
        print(f"Starting simulation of {n_bouts} bouts")
        print(f"Output directory: {out_dir}")

    os.makedirs(out_dir, exist_ok=True)

    results = []
    total_start_time = time.time()

    for i in range(n_bouts):
        if verbose:
            print(f"\n--- Bout {i+1}/{n_bouts} ---")

        # Different seed for each bout when a base seed is given
        bout_seed = random_seed + i if random_seed is not None else None

        result = simulate_single_bout(random_seed=bout_seed, verbose=verbose)

        try:
            csv_path, xes_path, json_path = result["engine"].export_logs(out_dir)
            result["log_files"] = {"csv": csv_path, "xes": xes_path, "json": json_path}

            if verbose:
                print(f"Logs exported to: {csv_path}, {xes_path}, {json_path}")

        except OSError as e:
            print(f"Warning: Failed to export logs for bout {i+1}: {e}")
            result["log_files"] = {"error": str(e)}

        del result["engine"]
        results.append(result)

    total_time = time.time() - total_start_time

    if verbose and n_bouts > 1:
        print(f"\n=== SIMULATION SUMMARY ===")
        print(f"Total bouts: {n_bouts}")
        print(f"Total time: {total_time:.2f} seconds")
        print(f"Average time per bout: {total_time/n_bouts:.2f} seconds")
        print_batch_summary(results)

    return results


def print_bout_summary(result: Dict[str, Any]) -> None:
    """Print formatted bout summary."""
    teams = result['teams']
    score = result['final_score']

    print(f"\n=== BOUT SUMMARY ===")
    print(f"Final Score: {teams['home']} {score['home']}-{score['away']} {teams['away']}")
    print(f"Jams: {result['jams']} over {result['periods']} period(s)")

    print(f"\nLead Jammer:")
    print(f"  {teams['home']}: {result['lead_jams']['home']}")
    print(f"  {teams['away']}: {result['lead_jams']['away']}")

    print(f"\nPenalties:")
    print(f"  {teams['home']}: {result['penalties']['home']}")
    print(f"  {teams['away']}: {result['penalties']['away']}")

    stats = result.get('event_log_stats', {})
    if stats:
        print(f"\nEvent Log Stats:")
        print(f"  Total events: {stats.get('total_events', 0)}")
        print(f"  Scoring trips: {stats.get('scoring_trips', 0)}")
        print(f"  Average jam duration: {stats.get('avg_jam_duration_ms', 0) / 1000:.1f}s")


def print_batch_summary(results: List[Dict[str, Any]]) -> None:
    """Print summary statistics across multiple bouts."""
    if not results:
        return

    home_wins = sum(1 for r in results if r['final_score']['home'] > r['final_score']['away'])
    away_wins = sum(1 for r in results if r['final_score']['away'] > r['final_score']['home'])
    ties = len(results) - home_wins - away_wins

    avg_points = sum(r['final_score']['home'] + r['final_score']['away'] for r in results) / len(results)
    avg_jams = sum(r['jams'] for r in results) / len(results)

    print(f"\nResults Distribution:")
    print(f"  Home wins: {home_wins} ({home_wins/len(results)*100:.1f}%)")
    print(f"  Away wins: {away_wins} ({away_wins/len(results)*100:.1f}%)")
    print(f"  Ties: {ties} ({ties/len(results)*100:.1f}%)")

    print(f"\nAverages per bout:")
    print(f"  Points: {avg_points:.1f}")
    print(f"  Jams: {avg_jams:.1f}")


def main():
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(description='Roller Derby Bout Simulation')
    parser.add_argument('-s', '--seed', type=int, default=None, help='Random seed for reproducibility')
    parser.add_argument('--games', type=int, default=1, help='Number of bouts to simulate')
    parser.add_argument('--output-dir', type=str, default='logs', help='Output directory for logs')
    parser.add_argument('-j', '--game-json', type=str, default=None,
                        help='Write the scoreboard JSON of a single bout to this path')
    parser.add_argument('--quiet', action='store_true', help='Suppress detailed output')
    parser.add_argument('--log-level', type=str, default='WARNING', help='Logging level for the engine')

    args = parser.parse_args()
    logging.basicConfig(level=args.log_level.upper(), format='%(levelname)s %(name)s: %(message)s')

    try:
        if args.game_json:
            result = simulate_single_bout(random_seed=args.seed, verbose=not args.quiet)
            result["engine"].export_game_json(args.game_json)
            print(f"Game JSON written to {args.game_json}")
            return

        simulate_bouts(
            n_bouts=args.games,
            random_seed=args.seed,
            out_dir=args.output_dir,
            verbose=not args.quiet
        )

        print(f"\nSimulation completed successfully!")
        print(f"Logs saved to: {os.path.abspath(args.output_dir)}")

    except KeyboardInterrupt:
        print("\nSimulation interrupted by user")
        sys.exit(1)
    except Exception as e:
        print(f"Error during simulation: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
