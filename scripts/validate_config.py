#!/usr/bin/env python3
"""Configuration validation script."""

import sys
from pathlib import Path

# Add the project root to the Python path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from trend_trader.config.defaults import StrategyKind, default_strategy_config
from trend_trader.config.loader import ConfigLoader
from trend_trader.config.validation import ConfigValidator
from trend_trader.errors import ConfigurationError


def main():
    """Validate the config file, and the defaults for every strategy kind."""
    config_path = Path(sys.argv[1]) if len(sys.argv) > 1 else None
    loader = ConfigLoader.create(config_path)

    print(f"🔍 Validating {loader.config_path}...")

    all_valid = True

    try:
        config = loader.load()
        print(f"✅ {config.strategy.kind.value} strategy on {len(config.markets)} market(s), "
              f"{config.dispatcher.value} dispatch")
        missing = [m for m in config.markets if m not in config.source.tokens]
        if missing:
            print(f"⚠️  No CLOB token id for: {', '.join(missing)}")
    except ConfigurationError as e:
        print(f"❌ {e}")
        for error in e.errors:
            print(f"  • {error}")
        all_valid = False

    # Each kind's defaults must fit its own window
    for kind in StrategyKind:
        print(f"\n📊 Checking {kind.value} defaults...")
        strategy = default_strategy_config(kind)
        errors = ConfigValidator.validate_strategy_config(strategy)
        if errors:
            for error in errors:
                print(f"❌ {error.field}: {error.message} (got {error.value!r})")
            all_valid = False
        else:
            print(f"✅ lookback {strategy.lookback}, needs {strategy.required_points} points")

    if all_valid:
        print(f"\n🎉 All configuration validation passed!")
        sys.exit(0)
    else:
        print(f"\n❌ Configuration validation failed!")
        sys.exit(1)


if __name__ == "__main__":
    main()
