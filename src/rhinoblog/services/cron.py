"""Five-field cron expressions for the generation schedule."""

from __future__ import annotations

from datetime import datetime, timedelta

from rhinoblog.db.time import utcnow

__all__ = ["CronParseError", "CronField", "CronExpression", "is_valid_cron"]


class CronParseError(ValueError):
    """Raised when a cron expression cannot be parsed."""


class CronField:
    """
    Represents a single field within a cron expression.

    Supports: *, specific values, ranges (1-5), lists (1,3,5), steps (*/15, 1-10/2).
    Values outside the field's bounds are rejected.
    """

    def __init__(self, expression: str, min_val: int, max_val: int) -> None:
        self.expression = expression
        self.min_val = min_val
        self.max_val = max_val
        self.is_wildcard = expression.strip() in ("*", "?")
        self.values: set[int] = self._parse(expression)

    def _int(self, token: str) -> int:
        try:
            value = int(token)
        except ValueError as exc:
            raise CronParseError(f"Invalid cron value {token!r}") from exc
        if not self.min_val <= value <= self.max_val:
            raise CronParseError(
                f"Cron value {value} outside {self.min_val}-{self.max_val}"
            )
        return value

    def _parse(self, expr: str) -> set[int]:
        """Parse a single cron field expression into a set of matching integers."""
        values: set[int] = set()

        for part in expr.split(","):
            part = part.strip()
            if not part:
                raise CronParseError(f"Empty list item in cron field {expr!r}")

            step = 1
            if "/" in part:
                range_part, step_str = part.split("/", 1)
                try:
                    step = int(step_str)
                except ValueError as exc:
                    raise CronParseError(f"Invalid cron step {step_str!r}") from exc
                if step < 1:
                    raise CronParseError(f"Cron step must be positive, got {step}")
                part = range_part

            if part in ("*", "?"):
                values.update(range(self.min_val, self.max_val + 1, step))
            elif "-" in part:
                start_str, end_str = part.split("-", 1)
                start = self._int(start_str)
                end = self._int(end_str)
                if start > end:
                    raise CronParseError(f"Cron range {part!r} runs backwards")
                values.update(range(start, end + 1, step))
            elif step != 1:
                # "5/15" means every 15 starting at 5.
                values.update(range(self._int(part), self.max_val + 1, step))
            else:
                values.add(self._int(part))

        return values

    def matches(self, value: int) -> bool:
        """Check if a value matches this field."""
        return value in self.values

    def __repr__(self) -> str:
        return f"CronField({self.expression!r}, values={sorted(self.values)})"


class CronExpression:
    """
    Parse and evaluate standard cron expressions.

    Format: minute hour day-of-month month day-of-week

    Day-of-week uses 0=Sunday; 7 is accepted as Sunday too. When both
    day-of-month and day-of-week are restricted, a time matches if either
    one does, as in classic cron.

    Examples:
        "0 12 * * *"     -> every day at noon
        "*/15 * * * *"   -> every 15 minutes
        "30 9 * * 1-5"   -> 9:30 on weekdays
    """

    def __init__(self, expression: str) -> None:
        self.expression = expression.strip()
        parts = self.expression.split()
        if len(parts) != 5:
            raise CronParseError(
                f"Cron expression must have exactly 5 fields "
                f"(minute hour dom month dow), got {len(parts)}: {self.expression!r}"
            )

        self.minute = CronField(parts[0], 0, 59)
        self.hour = CronField(parts[1], 0, 23)
        self.day_of_month = CronField(parts[2], 1, 31)
        self.month = CronField(parts[3], 1, 12)
        self.day_of_week = CronField(parts[4], 0, 7)
        if 7 in self.day_of_week.values:
            self.day_of_week.values.add(0)

    def _day_matches(self, dt: datetime) -> bool:
        # Python: Mon=0 .. Sun=6; cron: Sun=0 .. Sat=6
        cron_weekday = (dt.weekday() + 1) % 7
        dom_ok = self.day_of_month.matches(dt.day)
        dow_ok = self.day_of_week.matches(cron_weekday)
        if self.day_of_month.is_wildcard or self.day_of_week.is_wildcard:
            return dom_ok and dow_ok
        return dom_ok or dow_ok

    def matches(self, dt: datetime) -> bool:
        """Check if a datetime matches this cron expression (seconds ignored)."""
        return (
            self.minute.matches(dt.minute)
            and self.hour.matches(dt.hour)
            and self.month.matches(dt.month)
            and self._day_matches(dt)
        )

    def next_run(self, after: datetime | None = None) -> datetime:
        """
        Calculate the next datetime matching this cron expression strictly
        after the given time, in the same timezone as *after*.

        Raises CronParseError if nothing matches within about four years
        (for example "0 0 31 2 *").
        """
        if after is None:
            after = utcnow()

        candidate = after.replace(second=0, microsecond=0) + timedelta(minutes=1)
        limit = candidate + timedelta(days=366 * 4 + 1)

        while candidate < limit:
            if not self.month.matches(candidate.month) or not self._day_matches(candidate):
                candidate = (candidate + timedelta(days=1)).replace(hour=0, minute=0)
                continue
            if not self.hour.matches(candidate.hour):
                candidate = (candidate + timedelta(hours=1)).replace(minute=0)
                continue
            if not self.minute.matches(candidate.minute):
                candidate += timedelta(minutes=1)
                continue
            return candidate

        raise CronParseError(
            f"No matching time found for cron expression {self.expression!r} "
            f"after {after.isoformat()}"
        )

    def __repr__(self) -> str:
        return f"CronExpression({self.expression!r})"

    def __str__(self) -> str:
        return self.expression


def is_valid_cron(expression: str) -> bool:
    """True if ``expression`` parses as a five-field cron expression."""
    try:
        CronExpression(expression)
    except CronParseError:
        return False
    return True
