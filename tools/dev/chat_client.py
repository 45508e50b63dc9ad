#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Builder Chat Server — Dev Chat Client (/api/chat)
-------------------------------------------------
Interactive console tool for talking to the chat server over HTTP.

- Simple REPL: you type, the assistant answers.
- Sends { message, sessionId } to /api/chat and keeps the sessionId the
  server returns, so the conversation continues across turns.
- Commands:
    /clear  drop the current session's history on the server
    /new    forget the session id locally and start a fresh session
    /quit   exit
"""

from __future__ import annotations

import argparse
import sys
from typing import Any, Dict, Optional

import requests

DEFAULT_SERVER = "http://127.0.0.1:8000"


# ---------------------------------------------------------------------------
# CLI argument parsing
# ---------------------------------------------------------------------------


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Builder Chat Server — Dev Chat Client (/api/chat)",
    )
    parser.add_argument(
        "--server",
        type=str,
        default=DEFAULT_SERVER,
        help=f"Server base URL (default: {DEFAULT_SERVER})",
    )
    parser.add_argument(
        "--session",
        type=str,
        default=None,
        help="Resume an existing sessionId instead of starting a new one.",
    )
    parser.add_argument(
        "--timeout",
        type=float,
        default=120.0,
        help="HTTP timeout in seconds (default: 120).",
    )
    return parser.parse_args()


# ---------------------------------------------------------------------------
# HTTP helpers
# ---------------------------------------------------------------------------


def post_json(url: str, payload: Dict[str, Any], timeout: float) -> Dict[str, Any]:
    """POST `payload` and return the decoded body, raising on transport errors."""
    resp = requests.post(url, json=payload, timeout=timeout)
    try:
        data = resp.json()
    except ValueError:
        data = {"error": f"HTTP {resp.status_code}", "details": resp.text[:200]}
    if resp.status_code != 200 and "error" not in data:
        data["error"] = f"HTTP {resp.status_code}"
    return data


def print_error(data: Dict[str, Any]) -> None:
    print(f"Server error: {data.get('error')}")
    details = data.get("details")
    if details:
        print(f"  details: {details}")
    print()


# ---------------------------------------------------------------------------
# REPL
# ---------------------------------------------------------------------------


def run(args: argparse.Namespace) -> None:
    base = args.server.rstrip("/")
    session_id: Optional[str] = args.session

    print("Type a message and press Enter. Commands: /clear, /new, /quit\n")
    print(f"[client] server  : {base}")
    print(f"[client] session : {session_id or '-'}")
    print()

    while True:
        try:
            text = input("You: ")
        except (EOFError, KeyboardInterrupt):
            print("\nBye.")
            return

        command = text.strip().lower()
        if not command:
            continue
        if command in {"/quit", "/exit"}:
            print("Bye.")
            return
        if command == "/new":
            session_id = None
            print("[client] Starting a new session.\n")
            continue

        try:
            if command == "/clear":
                if not session_id:
                    print("[client] No session yet.\n")
                    continue
                data = post_json(f"{base}/api/clear", {"sessionId": session_id}, args.timeout)
                if data.get("success"):
                    print(f"[client] Cleared session {session_id}.\n")
                else:
                    print_error(data)
                continue

            payload: Dict[str, Any] = {"message": text}
            if session_id:
                payload["sessionId"] = session_id
            data = post_json(f"{base}/api/chat", payload, args.timeout)
        except requests.RequestException as exc:
            print(f"\nConnection error: {exc}\n")
            continue

        if "error" in data:
            print_error(data)
            continue

        if data.get("sessionId") and data["sessionId"] != session_id:
            session_id = data["sessionId"]
            print(f"[client] session : {session_id}")

        print(f"\nAssistant: {data.get('reply')}\n")


def main() -> None:
    args = parse_args()
    try:
        run(args)
    except KeyboardInterrupt:
        print("\nBye.")
        sys.exit(0)


if __name__ == "__main__":
    main()
