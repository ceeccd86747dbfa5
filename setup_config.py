#!/usr/bin/env python3
# Area: Shared
"""
GeoHistory - Configuration Setup Script
=======================================

Interactive script to generate app.config.json and .env files.

Usage:
    python setup_config.py
"""

import json
from pathlib import Path

PROVIDERS = ["gemini", "local_openai_compatible", "lmstudio", "anthropics"]

API_KEY_ENV = {
    "gemini": "GEMINI_API_KEY",
    "local_openai_compatible": "LOCAL_OPENAI_API_KEY",
    "lmstudio": "LMSTUDIO_API_KEY",
    "anthropics": "ANTHROPIC_API_KEY",
}


def prompt(question: str, default: str = "", required: bool = True) -> str:
    """Prompt user for input with optional default value."""
    if default:
        display = f"{question} [{default}]: "
    else:
        display = f"{question}: "

    while True:
        value = input(display).strip()
        if not value and default:
            return default
        if value:
            return value
        if not required:
            return ""
        print("  This field is required. Please enter a value.")


def prompt_choice(question: str, choices: list, default: str) -> str:
    """Prompt until the answer is one of choices."""
    while True:
        value = prompt(f"{question} ({'/'.join(choices)})", default=default)
        if value in choices:
            return value
        print(f"  Please choose one of: {', '.join(choices)}")


def print_header():
    """Print welcome header."""
    print()
    print("=" * 60)
    print("  GeoHistory - Configuration Setup")
    print("=" * 60)
    print()
    print("This script will help you create app.config.json and .env files.")
    print("Press Enter to accept default values shown in [brackets].")
    print()


def print_section(title: str):
    """Print section header."""
    print()
    print(f"--- {title} ---")
    print()


def get_config_values() -> tuple:
    """Interactively collect configuration values and API keys."""
    config = {"version": 1, "inference": {"providers": {}, "routing": {}}}
    secrets = {}

    print_section("Local OpenAI-compatible server")
    base_url = prompt("Base URL", default="http://127.0.0.1:8841")
    config["inference"]["providers"]["local_openai_compatible"] = {"baseURL": base_url}

    print_section("Routing")
    for level in ("light", "normal"):
        provider = prompt_choice(f"Provider for {level} requests", PROVIDERS,
                                 default="local_openai_compatible")
        model = prompt(f"Model for {level} requests (blank = provider default)", required=False)
        config["inference"]["routing"][level] = {"provider": provider, "model": model}

    print_section("API Keys (leave blank to skip)")
    for provider in PROVIDERS:
        key = prompt(f"{API_KEY_ENV[provider]}", required=False)
        if key:
            secrets[API_KEY_ENV[provider]] = key

    print_section("Gameplay Defaults")
    config["gameplayDefaults"] = {
        "category": prompt_choice("Category", ["History", "Geography"], default="History"),
        "difficulty": prompt_choice(
            "Difficulty", ["HIGH_SCHOOL", "COLLEGE", "PROFESSIONAL"], default="HIGH_SCHOOL"
        ),
        "questionCount": int(prompt("Question count (1-20)", default="10")),
        "scope": prompt("Scope", default="*"),
    }

    return config, secrets


def write_config_json(config: dict, path: Path) -> None:
    """Write app.config.json file."""
    with open(path, "w", encoding="utf-8") as f:
        json.dump(config, f, indent=4)
    print(f"  Created: {path}")


def write_env_file(secrets: dict, path: Path) -> None:
    """Write .env file."""
    lines = [f"{key}={value}" for key, value in secrets.items()]
    with open(path, "w", encoding="utf-8") as f:
        f.write("\n".join(lines) + "\n")
    print(f"  Created: {path}")


def main():
    """Main entry point."""
    print_header()

    try:
        config, secrets = get_config_values()
    except KeyboardInterrupt:
        print("\n\nSetup cancelled.")
        return 1

    print_section("Generating Files")

    base_path = Path.cwd()
    write_config_json(config, base_path / "app.config.json")
    write_env_file(secrets, base_path / ".env")

    print()
    print("=" * 60)
    print("  Setup Complete!")
    print("=" * 60)
    print()
    print("Next steps:")
    print()
    print("  1. Check the routing table:")
    print("     python -m geohistory routing")
    print()
    print("  2. List the models your providers offer:")
    print("     python -m geohistory models local_openai_compatible")
    print()
    print("  3. Send a test prompt:")
    print("     python -m geohistory ask \"Name a river in Africa\" --power light")
    print()
    return 0


if __name__ == "__main__":
    exit(main())
