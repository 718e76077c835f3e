# (c) Copyright Datacraft, 2026
from .bootstrap import run


def main() -> None:
	run()


if __name__ == "__main__":
	main()
