"""
Presentation boundary - what the interactive view shows for one tick.

build_view() turns a Reconciliation into plain values (cards, drawer rows,
labels); render_text() lays them out for a terminal. Neither touches the
store or the network.
"""

from dataclasses import dataclass, field
from datetime import datetime

from dayflow.timeline import derive
from dayflow.timeline.events import CanonicalEvent
from dayflow.timeline.reconcile import Reconciliation

IDLE_TITLE = "No event right now"
IDLE_SUBTITLE = "Enjoy the free time ✦"
EMPTY_DAY = "No events today ✦"


@dataclass(frozen=True)
class NowCard:
    idle: bool
    title: str
    time_range: str
    progress: float = 0.0
    minutes_left_label: str = ""
    can_complete: bool = False
    event_id: str | None = None


@dataclass(frozen=True)
class NextCard:
    event_id: str
    icon: str
    title: str
    time_range: str
    eta: str


@dataclass(frozen=True)
class DrawerRow:
    event_id: str
    title: str
    time_range: str
    check: str  # "checked" | "current" | "empty"
    tag: str  # "now" | "next" | ""
    undoable: bool = False


@dataclass(frozen=True)
class TimelineView:
    date_label: str
    day_percent: int
    orb: str
    streak_label: str
    now: NowCard
    next: NextCard | None
    drawer: list[DrawerRow] = field(default_factory=list)
    expand_label: str | None = None


def _local(moment: datetime, now: datetime) -> datetime:
    return moment.astimezone(now.tzinfo) if now.tzinfo else moment


def _range(event: CanonicalEvent, now: datetime) -> str:
    return derive.fmt_range(_local(event.start, now), _local(event.end, now))


def _now_card(current: CanonicalEvent | None, now: datetime) -> NowCard:
    if current is None:
        return NowCard(idle=True, title=IDLE_TITLE, time_range=IDLE_SUBTITLE)
    return NowCard(
        idle=False,
        title=current.title,
        time_range=_range(current, now),
        progress=derive.progress(current, now),
        minutes_left_label=f"{derive.minutes_left(current, now)} min left",
        can_complete=True,
        event_id=current.id,
    )


def _next_card(nxt: CanonicalEvent | None, now: datetime) -> NextCard | None:
    if nxt is None:
        return None
    return NextCard(
        event_id=nxt.id,
        icon=derive.event_emoji(nxt.title),
        title=nxt.title,
        time_range=_range(nxt, now),
        eta=derive.next_eta(nxt, now),
    )


def _drawer(result: Reconciliation) -> list[DrawerRow]:
    now = result.now
    c = result.classification
    current_id = c.current.id if c.current else None
    next_id = c.next.id if c.next else None
    running_ids = {e.id for e in c.concurrent}

    rows = []
    for event in c.ordered():
        done = event.end <= now
        if done:
            check = "checked"
        elif event.id == current_id or event.id in running_ids:
            check = "current"
        else:
            check = "empty"
        tag = "now" if event.id == current_id else "next" if event.id == next_id else ""
        rows.append(
            DrawerRow(
                event_id=event.id,
                title=event.title,
                time_range=_range(event, now),
                check=check,
                tag=tag,
                undoable=done and event.id in result.overrides,
            )
        )
    return rows


def build_view(result: Reconciliation, streak: int = 1, drawer_open: bool = False) -> TimelineView:
    now = result.now
    c = result.classification
    total = len(result.events)
    shown = (1 if c.current else 0) + (1 if c.next else 0)
    return TimelineView(
        date_label=f"{now:%A}, {now:%B} {now.day}",
        day_percent=derive.round_half_up(derive.day_progress(now)),
        orb=derive.day_phase_orb(now),
        streak_label=derive.streak_label(streak),
        now=_now_card(c.current, now),
        next=_next_card(c.next, now),
        drawer=_drawer(result),
        expand_label=derive.expand_label(total, shown, drawer_open),
    )


_CHECK_MARKS = {"checked": "✓", "current": "▶", "empty": "○"}


def _bar(percent: float, width: int = 20) -> str:
    filled = int(round(percent / 100 * width))
    return "█" * filled + "░" * (width - filled)


def render_text(view: TimelineView, drawer_open: bool = False) -> str:
    """Plain-text rendering of a TimelineView."""
    lines = [
        f"{view.date_label}    {view.streak_label}",
        f"{view.orb} {_bar(view.day_percent)} {view.day_percent}%",
        "",
    ]

    if view.now.idle:
        lines += [f"NOW   {view.now.title}", f"      {view.now.time_range}"]
    else:
        lines += [
            f"NOW   {view.now.title}",
            f"      {view.now.time_range}",
            f"      {_bar(view.now.progress)} {view.now.minutes_left_label}",
            f"      (dayflow complete {view.now.event_id} to end it now)",
        ]

    if view.next is not None:
        lines += ["", f"NEXT  {view.next.icon} {view.next.title}  {view.next.eta}",
                  f"      {view.next.time_range}"]

    if drawer_open:
        lines += ["", "TODAY"]
        if not view.drawer:
            lines.append(f"      {EMPTY_DAY}")
        for row in view.drawer:
            tag = f"  [{row.tag}]" if row.tag else ""
            undo = f"  (undo: dayflow undo {row.event_id})" if row.undoable else ""
            lines.append(f"  {_CHECK_MARKS[row.check]} {row.time_range:<18} {row.title}{tag}{undo}")
    elif view.expand_label:
        lines += ["", f"… {view.expand_label}"]

    return "\n".join(lines)
