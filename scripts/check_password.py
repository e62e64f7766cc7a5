"""
Score passwords from the command line with the same evaluator the API uses.

Usage (from repo root):
  python scripts/check_password.py 'Zebra#Lamp77' hunter2
  echo 'P@ssw0rd1234' | python scripts/check_password.py --weighted -
"""
import argparse
import json
import sys
from dataclasses import asdict
from pathlib import Path

_REPO_ROOT = Path(__file__).resolve().parent.parent
if str(_REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(_REPO_ROOT))

from cybersafe.services.password_strength import (  # noqa: E402
    check_password_strength,
    evaluate_weighted,
    weighted_strength_text,
)


def _passwords(args: argparse.Namespace) -> list[str]:
    if args.passwords == ["-"]:
        return [line.rstrip("\n") for line in sys.stdin if line.strip()]
    return args.passwords


def main() -> int:
    parser = argparse.ArgumentParser(description="Score password strength.")
    parser.add_argument("passwords", nargs="+", help="Passwords to score, or '-' to read one per line from stdin")
    parser.add_argument("--weighted", action="store_true", help="Also print the weighted score")
    parser.add_argument("--json", action="store_true", help="Print one JSON object per password")
    args = parser.parse_args()

    for password in _passwords(args):
        assessment = check_password_strength(password)
        row = {
            "strength": assessment.strength,
            "strengthText": assessment.strength_text,
            "requirements": asdict(assessment.requirements),
        }
        if args.weighted:
            weighted = evaluate_weighted(password)
            row["weighted"] = weighted
            row["weightedText"] = weighted_strength_text(weighted)
        if args.json:
            print(json.dumps(row))
        else:
            failed = [name for name, ok in row["requirements"].items() if not ok]
            line = f"{assessment.strength:>3} {assessment.strength_text:<12}"
            if args.weighted:
                line += f" weighted={row['weighted']} ({row['weightedText']})"
            if failed:
                line += f" missing: {', '.join(failed)}"
            print(line)

    return 0


if __name__ == "__main__":
    sys.exit(main())
