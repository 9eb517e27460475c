from grnevo.config import DEFAULTS_PATH, load_config
from grnevo.engine.runner import run_sinusoid


def main():
    config = load_config(DEFAULTS_PATH)
    run_sinusoid(config)


if __name__ == "__main__":
    main()
