"""
Candidate tracker CLI: list, inspect, create and transition candidates.

Usage:
    python scripts/candidates.py list [--query Q] [--page N] [--recent]
    python scripts/candidates.py show <id>
    python scripts/candidates.py add --name NAME --email EMAIL --test-link URL [--skill S ...] [--notes TEXT]
    python scripts/candidates.py set-status <id> {Pending,Passed,Failed}
    python scripts/candidates.py toggle-stage <id>
    python scripts/candidates.py notify <id>
    python scripts/candidates.py delete <id>

Status emails and deletes walk through the same dialog as the web client:
confirm → (failure reason) → recruiter name/email → send. Each step is
prompted for unless answered up front with --yes / --reason /
--recruiter-name / --recruiter-email.

Requires a stored session: run scripts/login.py first.
"""
from __future__ import annotations

import argparse
import asyncio
import sys
from pathlib import Path
from typing import Optional

# Allow running from repo root without installing the package
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from smartrecruit.errors import SessionExpired
from smartrecruit.models.candidate import CandidateRecord
from smartrecruit.models.pipeline import Status
from smartrecruit.services.api_client import HttpCandidateGateway
from smartrecruit.services.storage import clear_session, load_session
from smartrecruit.utils.logger import setup_logger
from smartrecruit.views.candidate_detail import CandidateDetailView
from smartrecruit.views.candidates_table import CandidatesTableView, RecentCandidatesView
from smartrecruit.views.new_candidate import NewCandidateForm
from smartrecruit.workflow.states import Outcome, Step
from smartrecruit.workflow.status_workflow import StatusTransitionWorkflow, WorkflowMode

SEP = "─" * 64

# ── Output helpers ─────────────────────────────────────────────────────────────

def _section(title: str) -> None:
    """Print a titled section divider."""
    print(f"\n{SEP}")
    print(f"  {title}")
    print(SEP)


def _ok(label: str, value: str) -> None:
    print(f"  ✓ {label:<20} {value}")


def _warn(label: str, value: str) -> None:
    print(f"  ⚠ {label:<20} {value}")


def _fail(label: str, value: str) -> None:
    print(f"  ✗ {label:<20} {value}")


def _prompt(question: str) -> Optional[str]:
    """Read one line of input; None if the user aborts."""
    try:
        return input(f"  {question}: ").strip()
    except (EOFError, KeyboardInterrupt):
        print("\n  Aborted.")
        return None


def _yes(question: str) -> bool:
    answer = _prompt(f"{question} [y/N]")
    return (answer or "").lower() == "y"


def _print_row(c: CandidateRecord) -> None:
    print(f"  {c.id:<26} {c.name[:22]:<22} {c.stage.value:<8} {c.status.value:<8} {c.email}")


# ── Workflow driver ────────────────────────────────────────────────────────────

async def _drive(workflow: StatusTransitionWorkflow, args: argparse.Namespace) -> bool:
    """
    Walk a workflow to completion from flags and/or prompts.

    Returns True when the email was sent / the candidate deleted.
    """
    c = workflow.candidate
    if workflow.mode is WorkflowMode.DELETE:
        question = f"Delete {c.name} <{c.email}>? This cannot be undone."
    else:
        question = (
            f"Send an email notification to {c.name} about their "
            f"{c.status.value.lower()} status?"
        )

    if not (args.yes or _yes(question)):
        workflow.decline()
        _warn("Cancelled", "nothing sent")
        return False

    await workflow.accept()

    if workflow.mode is WorkflowMode.DELETE:
        if workflow.outcome is not Outcome.SUCCEEDED:
            _fail("Delete", workflow.error or "Failed to delete candidate")
            workflow.close()
            return False
        _ok("Deleted", c.name)
        await workflow.wait_closed()
        return True

    reason = args.reason
    while workflow.step is Step.REASON:
        if reason is None:
            reason = _prompt("Reason for failure")
            if reason is None:
                workflow.decline()
                return False
        workflow.submit_reason(reason)
        if workflow.error:
            _fail("Reason", workflow.error)
            if args.reason is not None:
                workflow.decline()
                return False
            reason = None

    name, email = args.recruiter_name, args.recruiter_email
    while workflow.step is Step.RECRUITER:
        if name is None:
            name = _prompt("Recruiter name")
            if name is None:
                workflow.decline()
                return False
        if email is None:
            email = _prompt("Recruiter email (optional)") or ""

        await workflow.send(name, email)

        if workflow.outcome is Outcome.SUCCEEDED:
            _ok("Email sent", f"to {c.email}")
            if workflow.state.preview_ref:
                _ok("Preview", workflow.state.preview_ref)
            await workflow.wait_closed()
            return True

        _fail("Send", workflow.error or "Failed to send email")
        non_interactive = args.recruiter_name is not None
        if non_interactive or not _yes("Retry?"):
            workflow.close()
            return False
        name, email = None, None

    return False


# ── Commands ───────────────────────────────────────────────────────────────────

async def cmd_list(gateway: HttpCandidateGateway, args: argparse.Namespace) -> int:
    view = RecentCandidatesView(gateway) if args.recent else CandidatesTableView(gateway)
    _section("Recent Candidates" if args.recent else "Candidates")

    await view.set_query(args.query or "")
    if view.error:
        _fail("Load", view.error)
        return 1

    view.go_to_page(args.page)
    rows = view.visible()
    if not rows:
        _warn("Result", "No candidates found")
        return 0

    for c in rows:
        _print_row(c)
    if view.paginator.has_pages():
        print(f"\n  Page {view.paginator.page} of {view.paginator.page_count()}  ({len(view.store)} total)")
    return 0


async def cmd_show(gateway: HttpCandidateGateway, args: argparse.Namespace) -> int:
    view = CandidateDetailView(gateway, args.id)
    if not await view.load():
        _fail("Load", view.error or "Failed to load candidate details")
        return 1

    c = view.candidate
    _section(c.name)
    _ok("Email", c.email)
    _ok("Test link", c.test_link or "—")
    _ok("Stage", c.stage.value)
    _ok("Status", c.status.value)
    if c.created_at:
        _ok("Added", c.created_at.strftime("%Y-%m-%d %H:%M"))
    if c.skills:
        _ok("Skills", ", ".join(c.skills))
    if c.notes:
        _ok("Notes", c.notes)

    if c.email_history:
        _section("Email History")
        for e in c.email_history:
            print(f"  {e.date:%Y-%m-%d %H:%M}  {e.stage.value} - {e.status.value} Update  (by {e.recruiter_name})")
            if e.reason:
                print(f"      Reason: {e.reason}")
    return 0


async def cmd_add(gateway: HttpCandidateGateway, args: argparse.Namespace) -> int:
    form = NewCandidateForm(gateway, success_clear_delay=0)
    for skill in args.skill or []:
        if not form.add_skill(skill):
            _warn("Skill", f"Skipped duplicate/blank: {skill!r}")

    if not await form.submit(args.name, args.email, args.test_link, notes=args.notes):
        if form.field_errors:
            for field, message in form.field_errors.items():
                _fail(field, message)
        else:
            _fail("Add", form.error or "Failed to add candidate")
        return 1

    created = form.created
    _ok("Added", f"{created.name} ({created.id})" if created else args.name.strip())
    await form.wait_success_cleared()
    return 0


async def cmd_set_status(gateway: HttpCandidateGateway, args: argparse.Namespace) -> int:
    view = CandidatesTableView(gateway)
    if not await view.refresh():
        _fail("Load", view.error)
        return 1
    if args.id not in view.store:
        _fail("Candidate", f"Not found: {args.id}")
        return 1

    workflow = await view.update_status(args.id, Status(args.status))
    if view.error:
        _fail("Status", view.error)
        return 1
    _ok("Status", f"{view.store.get(args.id).name} → {args.status}")

    if workflow is not None:
        _section("Status Update Email")
        await _drive(workflow, args)
    return 0


async def cmd_toggle_stage(gateway: HttpCandidateGateway, args: argparse.Namespace) -> int:
    view = CandidatesTableView(gateway)
    if not await view.refresh():
        _fail("Load", view.error)
        return 1
    if args.id not in view.store:
        _fail("Candidate", f"Not found: {args.id}")
        return 1

    if not await view.toggle_stage(args.id):
        _fail("Stage", view.error or "Failed to update stage")
        return 1
    c = view.store.get(args.id)
    _ok("Stage", f"{c.name} → {c.stage.value}")
    return 0


async def cmd_notify(gateway: HttpCandidateGateway, args: argparse.Namespace) -> int:
    view = CandidateDetailView(gateway, args.id)
    if not await view.load():
        _fail("Load", view.error)
        return 1

    _section("Status Update Email")
    return 0 if await _drive(view.open_status_workflow(), args) else 1


async def cmd_delete(gateway: HttpCandidateGateway, args: argparse.Namespace) -> int:
    view = CandidatesTableView(gateway)
    if not await view.refresh():
        _fail("Load", view.error)
        return 1

    workflow = view.open_delete_workflow(args.id)
    if workflow is None:
        _fail("Candidate", f"Not found: {args.id}")
        return 1

    _section("Delete Candidate")
    if not await _drive(workflow, args):
        return 1
    _ok("Remaining", f"{len(view.store)} candidate(s)")
    return 0


COMMANDS = {
    "list": cmd_list,
    "show": cmd_show,
    "add": cmd_add,
    "set-status": cmd_set_status,
    "toggle-stage": cmd_toggle_stage,
    "notify": cmd_notify,
    "delete": cmd_delete,
}


async def main(args: argparse.Namespace) -> int:
    session = load_session()
    if session is None:
        _fail("Session", "Not logged in — run scripts/login.py first")
        return 1

    gateway = HttpCandidateGateway(session)
    try:
        return await COMMANDS[args.command](gateway, args)
    except SessionExpired as e:
        clear_session()
        _fail("Session", f"{e.message} — log in again with scripts/login.py")
        return 1


# ── Entry point ────────────────────────────────────────────────────────────────

def _workflow_flags(p: argparse.ArgumentParser) -> None:
    p.add_argument("--yes", "-y", action="store_true", help="Answer 'yes' to the confirmation step")
    p.add_argument("--reason", default=None, help="Failure reason (Failed status only)")
    p.add_argument("--recruiter-name", default=None, help="Recruiter name to sign the email with")
    p.add_argument("--recruiter-email", default=None, help="Recruiter reply-to email")


if __name__ == "__main__":
    parser = argparse.ArgumentParser(
        description="SmartRecruit candidate tracker.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("--debug", action="store_true", help="Log debug output to the console")
    sub = parser.add_subparsers(dest="command", required=True)

    p = sub.add_parser("list", help="List or search candidates")
    p.add_argument("--query", "-q", default="", help="Search by name or email")
    p.add_argument("--page", type=int, default=1, help="Page number (clamped to the available range)")
    p.add_argument("--recent", action="store_true", help="Only the 5 most recent candidates")

    p = sub.add_parser("show", help="Show one candidate with email history")
    p.add_argument("id")

    p = sub.add_parser("add", help="Add a new candidate")
    p.add_argument("--name", required=True)
    p.add_argument("--email", required=True)
    p.add_argument("--test-link", required=True)
    p.add_argument("--skill", action="append", help="Repeatable")
    p.add_argument("--notes", default=None)

    p = sub.add_parser("set-status", help="Change status; Passed/Failed offer a status email")
    p.add_argument("id")
    p.add_argument("status", choices=[s.value for s in Status])
    _workflow_flags(p)

    p = sub.add_parser("toggle-stage", help="Flip between Stage 1 and Stage 2")
    p.add_argument("id")

    p = sub.add_parser("notify", help="Send a status update email")
    p.add_argument("id")
    _workflow_flags(p)

    p = sub.add_parser("delete", help="Delete a candidate")
    p.add_argument("id")
    p.add_argument("--yes", "-y", action="store_true", help="Skip the confirmation prompt")

    args = parser.parse_args()
    setup_logger(level="DEBUG" if args.debug else None)

    sys.exit(asyncio.run(main(args)))
