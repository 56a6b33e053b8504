import json
import sys
from pathlib import Path

import requests

WRAP_URL = "http://127.0.0.1:7070/wrap/project"

# java files (or directories of them) to send, defaults to the current directory
paths = [Path(p) for p in sys.argv[1:]] or [Path(".")]


def collect_java_files(roots):
    files = {}
    for root in roots:
        if root.is_file():
            files[str(root)] = root.read_text(encoding="utf-8")
            continue
        for p in sorted(root.rglob("*.java")):
            files[str(p)] = p.read_text(encoding="utf-8")
    return files


def main():
    files = collect_java_files(paths)
    print(f"Sending {len(files)} Java files to {WRAP_URL}")

    payload = {
        "files": [{"filename": name, "code": code} for name, code in files.items()],
        "write": False,
    }
    resp = requests.post(WRAP_URL, json=payload, timeout=40)
    resp.raise_for_status()
    data = resp.json()

    for w in data["wrappers"]:
        print(f"\n=== {w['path']} ===")
        print(w["source"])

    if data["errors"] or data["parse_errors"]:
        print("=== Errors ===")
        print(json.dumps({"errors": data["errors"], "parse_errors": data["parse_errors"]}, indent=2))


if __name__ == "__main__":
    main()
