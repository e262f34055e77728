#!/usr/bin/env python3
"""
Keep shopper traffic flowing against a storefront service.
Restarts the generator whenever a run ends, until stopped with Ctrl+C.
"""
import argparse
import os
import signal
import subprocess
import sys
import time

process = None
stopping = False


def stop(sig, frame):
    global stopping
    stopping = True
    print('\n\nStopping traffic generation...')
    if process and process.poll() is None:
        process.terminate()
        try:
            process.wait(timeout=5)
        except subprocess.TimeoutExpired:
            process.kill()
    sys.exit(0)


signal.signal(signal.SIGINT, stop)
signal.signal(signal.SIGTERM, stop)


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Run the storefront traffic generator until stopped")
    parser.add_argument("--users", type=int, default=20, help="Concurrent shoppers per run (default: 20)")
    parser.add_argument("--run-seconds", type=int, default=3600, help="Length of each run (default: 3600)")
    parser.add_argument("--url", type=str, default="http://localhost:8000", help="API URL")
    args = parser.parse_args()

    script_dir = os.path.dirname(os.path.abspath(__file__))
    command = [
        sys.executable,
        os.path.join(script_dir, "generate-traffic.py"),
        "--users", str(args.users),
        "--duration", str(args.run_seconds),
        "--url", args.url,
    ]

    print(f"Sending storefront traffic to {args.url} with {args.users} shoppers")
    print("Press Ctrl+C to stop\n")

    while not stopping:
        process = subprocess.Popen(command, cwd=script_dir, stdout=sys.stdout, stderr=sys.stderr)
        exit_code = process.wait()
        if exit_code != 0:
            print(f"Generator exited with code {exit_code}, restarting in 5s")
            time.sleep(5)
