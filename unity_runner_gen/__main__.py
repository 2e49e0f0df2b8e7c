"""Allow running as python -m unity_runner_gen."""

from unity_runner_gen.cli import main

main()
