#!/usr/bin/env python3
"""
Interactive local booking harness (no HTTP).

Usage:
  python3 scripts/book_local.py [--locale ar] [--test CBC]

Drives one WizardController built from the project wiring (mock endpoint unless
BOOKING_API_BASE_URL is set) and prints the wizard state after every command.
"""

from __future__ import annotations

import argparse
import asyncio
import shlex
import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from labvisit.application.exceptions import AttachmentError, WizardStateError
from labvisit.application.use_cases.wizard import WizardController
from labvisit.application.utils.messages import translate
from labvisit.domain.entities.booking_draft import Attachment
from labvisit.wiring.dependencies import build_wizard

HELP = """Commands:
  set <field> <value>     e.g. set phone 712345678 (fields: contact_name phone location_type address visit_date visit_time_slot)
  find [query] [category] list catalog tests
  toggle <test_id>        select / unselect a test
  attach <path>           attach a prescription file
  next | back | confirm | restart | locale <en|ar> | state | quit"""


def _print_state(wizard: WizardController) -> None:
    summary = wizard.summary()
    print("-" * 60)
    print(f"step={wizard.current_step} status={wizard.status.value} locale={wizard.locale}")
    for field, code in wizard.errors.items():
        print(f"  ! {field}: {translate(f'validation.{code}', wizard.locale)}")
    if wizard.submit_error:
        print(f"  ! {wizard.submit_error}")
    print(f"  contact: {summary.contact_name} {summary.phone} ({summary.location_label}) {summary.address}")
    if summary.prescription_filename:
        print(f"  prescription: {summary.prescription_filename}")
    else:
        print(f"  tests: {', '.join(summary.tests) or '-'}")
    print(f"  schedule: {summary.schedule or '-'}")
    print("-" * 60)


async def _run_command(wizard: WizardController, parts: list[str]) -> None:
    cmd, args = parts[0], parts[1:]
    if cmd == "set" and len(args) >= 2:
        wizard.update_field(**{args[0]: " ".join(args[1:])})
    elif cmd == "find":
        query = args[0] if args else ""
        category = args[1] if len(args) > 1 else "all"
        for test in wizard.catalog.filter(category_id=category, query=query):
            mark = "*" if test.id in wizard.draft.selected_tests else " "
            print(f" {mark} {test.id:<10} {test.code:<8} {wizard.catalog.display_name(test.id, wizard.locale)}")
    elif cmd == "toggle" and args:
        wizard.toggle_test(args[0])
    elif cmd == "attach" and args:
        path = Path(args[0])
        result = await wizard.attach_prescription(Attachment(content=path.read_bytes(), filename=path.name))
        print(f"attachment encoded: ~{result.estimated_size_bytes} bytes (quality={result.quality})")
    elif cmd == "next":
        print("advanced" if wizard.next() else "refused")
    elif cmd == "back":
        wizard.back()
    elif cmd == "confirm":
        outcome = await wizard.confirm()
        print("booked!" if outcome.success else f"failed: {outcome.message}")
    elif cmd == "restart":
        wizard.restart()
    elif cmd == "locale" and args:
        wizard.set_locale(args[0])
    elif cmd != "state":
        print(HELP)
        return
    _print_state(wizard)


async def main() -> None:
    parser = argparse.ArgumentParser(description=__doc__, formatter_class=argparse.RawDescriptionHelpFormatter)
    parser.add_argument("--locale", default=None)
    parser.add_argument("--test", default=None, help="deep link: catalog test id or code")
    args = parser.parse_args()

    wizard = build_wizard(locale=args.locale, deep_link=args.test)
    print(HELP)
    _print_state(wizard)

    while True:
        try:
            line = input("> ").strip()
        except (EOFError, KeyboardInterrupt):
            print()
            break
        if not line:
            continue
        parts = shlex.split(line)
        if parts[0] in {"quit", "exit", "/quit"}:
            break
        try:
            await _run_command(wizard, parts)
        except (AttachmentError, WizardStateError, ValueError, OSError) as e:
            print(f"error: {e}")


if __name__ == "__main__":
    asyncio.run(main())
