"""
Run the pendulum grid: live window, headless recording, or video export
"""

import argparse

import animator
import simulator
from config import GRAVITY_RANGE, LENGTH_RANGE, SPEED_RANGE, SimulationParameters
from logging_config import setup_logging


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Grid of independent chaotic double pendulums")
    parser.add_argument('mode', nargs='?', default='interactive', choices=['interactive', 'record', 'video'])
    parser.add_argument('--gravity', type=float, default=GRAVITY_RANGE.default)
    parser.add_argument('--length', type=float, default=LENGTH_RANGE.default, help="arm length multiplier")
    parser.add_argument('--speed', type=float, default=SPEED_RANGE.default, help="speed multiplier")
    parser.add_argument('--width', type=float, default=900, help="viewport width for recording")
    parser.add_argument('--height', type=float, default=900, help="viewport height for recording")
    parser.add_argument('--ticks', type=int, default=600, help="frames to record")
    parser.add_argument('--seed', type=int, default=None)
    parser.add_argument('--output', default='simulation_results.npz')
    parser.add_argument('--video', default='pendulum_grid.mp4')
    parser.add_argument('--playback-speed', type=float, default=1.0)
    parser.add_argument('--log-level', default='INFO')
    return parser


def main(argv=None):
    """
    Pipeline:
    - interactive: open the live grid with sliders
    - record: run headless and save frames to .npz
    - video: record, then render the frames to a video
    """
    args = build_parser().parse_args(argv)
    setup_logging(args.log_level)

    # Values outside the control ranges are snapped back into them
    params = SimulationParameters(
        gravity=args.gravity,
        length_multiplier=args.length,
        speed_multiplier=args.speed,
    ).clamped()

    print("=" * 60)
    print("PENDULUM GRID")
    print("=" * 60)
    print(f"Configuration:")
    print(f"  Gravity: {params.gravity:.1f}")
    print(f"  Length multiplier: {params.length_multiplier:.1f}")
    print(f"  Speed multiplier: {params.speed_multiplier:.1f}")
    print(f"  Mode: {args.mode}")
    print()

    if args.mode == 'interactive':
        animator.animate_grid(params=params, seed=args.seed)
        return

    print("Running numerical simulation...")
    print("-" * 60)
    simulator.simulate_grid(
        frames=args.ticks,
        width=args.width,
        height=args.height,
        params=params,
        seed=args.seed,
        output=args.output,
    )
    print()

    if args.mode == 'video':
        print("Creating animation...")
        print("-" * 60)
        animator.export_video(
            input_file=args.output,
            video_filename=args.video,
            playback_speed=args.playback_speed,
        )
        print()

    print("=" * 60)
    print("COMPLETE!")
    print("=" * 60)


if __name__ == '__main__':
    main()
