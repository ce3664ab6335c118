"""Entry point: python -m ifmeter."""

from ifmeter.session import main

if __name__ == "__main__":
    raise SystemExit(main())
