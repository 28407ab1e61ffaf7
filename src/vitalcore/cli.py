"""CLI for the vitalcore health and training analytics engine."""

import logging
from datetime import date, datetime

import click


def _parse_day(value: str | None) -> date:
    if value is None:
        return date.today()
    try:
        return date.fromisoformat(value)
    except ValueError:
        raise click.BadParameter(f"expected YYYY-MM-DD, got {value!r}")


def _echo_result(result) -> None:
    detail = " ".join(f"{k}={v}" for k, v in result.detail.items())
    if result:
        click.echo(f"OK {detail}".rstrip())
    else:
        click.echo(f"Rejected: {result.reason.value} {detail}".rstrip())


@click.group()
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging.")
def main(verbose: bool) -> None:
    """vitalcore: daily health scores, training load and run ledgers."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


@main.command()
@click.option("--metrics", "-m", type=click.Path(exists=True), default=None,
              help="Daily metrics file (JSON or JSONL).")
@click.option("--workouts", "-w", type=click.Path(exists=True), default=None,
              help="Workouts file (JSON or JSONL).")
@click.option("--profile", "-p", type=click.Path(exists=True), default=None,
              help="User profile JSON.")
@click.option("--date", "-d", "day", default=None, help="Report day (default: today).")
@click.option("--output", "-o", default=None, help="Write the report JSON to this file.")
def report(metrics: str | None, workouts: str | None, profile: str | None,
           day: str | None, output: str | None) -> None:
    """Build the full daily report and print it as JSON."""
    from vitalcore.analytics.pipeline import build_daily_report
    from vitalcore.config import load_profile
    from vitalcore.loader import load_metrics, load_workouts

    history = load_metrics(metrics) if metrics else []
    runs = load_workouts(workouts) if workouts else []
    result = build_daily_report(_parse_day(day), history, runs, load_profile(profile))

    text = result.to_json()
    if output:
        with open(output, "w") as f:
            f.write(text + "\n")
        click.echo(f"Wrote {output}")
    else:
        click.echo(text)


@main.command("load")
@click.option("--workouts", "-w", type=click.Path(exists=True), default=None,
              help="Workouts file (JSON or JSONL).")
@click.option("--profile", "-p", type=click.Path(exists=True), default=None,
              help="User profile JSON.")
@click.option("--date", "-d", "day", default=None, help="Last day of the windows.")
@click.option("--acute", type=float, default=None, help="Precomputed acute load.")
@click.option("--chronic", type=float, default=None, help="Precomputed chronic load.")
def load_cmd(workouts: str | None, profile: str | None, day: str | None,
             acute: float | None, chronic: float | None) -> None:
    """Show acute/chronic training load and the ACWR status."""
    from vitalcore.analytics.training_load import analyze_training_load, load_state_from_totals
    from vitalcore.config import load_profile
    from vitalcore.loader import load_workouts

    if acute is not None and chronic is not None:
        state = load_state_from_totals(acute, chronic)
    elif workouts:
        state = analyze_training_load(load_workouts(workouts), _parse_day(day),
                                      load_profile(profile))
    else:
        raise click.UsageError("give --workouts, or both --acute and --chronic")

    click.echo(f"Acute load:   {state.acute_load:.1f}")
    click.echo(f"Chronic load: {state.chronic_load:.1f}")
    click.echo(f"ACWR:         {state.ratio:.2f} ({state.status.value})")
    click.echo(f"Balance:      {state.training_balance:+.1f}")
    click.echo(state.recommendation)


@main.command()
@click.option("--workouts", "-w", type=click.Path(exists=True), default=None,
              help="Workouts file (JSON or JSONL).")
@click.option("--date", "-d", "day", default=None, help="Last day of the lookback window.")
@click.option("--distance", type=float, default=None, help="Reference distance (km).")
@click.option("--time", "time_sec", type=float, default=None, help="Reference time (seconds).")
def predict(workouts: str | None, day: str | None,
            distance: float | None, time_sec: float | None) -> None:
    """Project race times from recent runs or a given performance."""
    from vitalcore.analytics.race import RACE_DISTANCES, format_duration, predict_races, riegel_time
    from vitalcore.loader import load_workouts

    if distance is not None and time_sec is not None:
        if distance <= 0 or time_sec <= 0:
            raise click.BadParameter("distance and time must be positive")
        click.echo(f"From {distance:g} km in {format_duration(time_sec)}:")
        for name, d2 in RACE_DISTANCES.items():
            t = riegel_time(time_sec, distance, d2)
            click.echo(f"  {name:<14} {format_duration(t):>8}  ({format_duration(t / d2)}/km)")
        return

    if not workouts:
        raise click.UsageError("give --workouts, or both --distance and --time")

    result = predict_races(load_workouts(workouts), _parse_day(day))
    if result is None:
        click.echo("No qualifying runs in the last 90 days.")
        return

    click.echo(
        f"Reference: {result.reference_distance:.2f} km in "
        f"{format_duration(result.reference_time)} "
        f"({result.qualifying_runs} qualifying runs)"
    )
    for p in result.predictions:
        click.echo(
            f"  {p.name:<14} {format_duration(p.time):>8}  "
            f"({format_duration(p.pace)}/km, {p.confidence:.0f}% confidence)"
        )


@main.command()
@click.option("--workouts", "-w", type=click.Path(exists=True), default=None,
              help="Workouts file (JSON or JSONL).")
@click.option("--id", "workout_id", default=None, help="Workout id (default: latest).")
@click.option("--avg-hr", type=float, default=None, help="Average HR for a summary-only breakdown.")
@click.option("--duration", type=float, default=3600.0, help="Duration (s) with --avg-hr.")
@click.option("--max-hr", type=float, default=190.0, help="Max heart rate.")
def zones(workouts: str | None, workout_id: str | None, avg_hr: float | None,
          duration: float, max_hr: float) -> None:
    """Show heart rate time-in-zone for a workout."""
    from vitalcore.analytics.race import format_duration
    from vitalcore.analytics.zones import workout_zones, zones_from_summary
    from vitalcore.loader import load_workouts

    if avg_hr is not None:
        breakdown = zones_from_summary(avg_hr, max_hr, duration)
    elif workouts:
        records = load_workouts(workouts)
        if workout_id is not None:
            records = [w for w in records if w.id == workout_id]
        if not records:
            click.echo("No matching workout.")
            return
        click.echo(repr(records[-1]))
        breakdown = workout_zones(records[-1], max_hr)
    else:
        raise click.UsageError("give --workouts or --avg-hr")

    for z in breakdown.zones:
        marker = " *" if z.zone == breakdown.current_zone else ""
        click.echo(
            f"  Z{z.zone} {z.name:<13} {z.min_hr:>3}-{z.max_hr:<3} bpm  "
            f"{format_duration(z.duration):>8}  {z.percentage:5.1f}%{marker}"
        )


@main.command()
@click.argument("action", type=click.Choice(["show", "log", "freeze", "end-day"]))
@click.argument("day", required=False)
@click.option("--store", "-s", default="ledgers.json", help="Ledger JSON file.")
@click.option("--profile", "-p", type=click.Path(exists=True), default=None,
              help="User profile JSON.")
@click.option("--no-auto-freeze", is_flag=True, help="Do not spend the freeze at end of day.")
def streak(action: str, day: str | None, store: str, profile: str | None,
           no_auto_freeze: bool) -> None:
    """Show or update the run streak (log a run, use a freeze, close a day)."""
    from vitalcore.config import load_profile
    from vitalcore.ledgers.store import JsonLedgerStore

    ledger_store = JsonLedgerStore(store)
    ledger = ledger_store.load_streak(load_profile(profile), auto_freeze=not no_auto_freeze)
    when = _parse_day(day)

    if action == "log":
        result = ledger.log_run(when)
    elif action == "freeze":
        result = ledger.use_freeze(when)
    elif action == "end-day":
        result = ledger.check_end_of_day(when)
    else:
        result = None

    if result is not None:
        _echo_result(result)
        if result:
            ledger_store.save_streak(ledger)

    s = ledger.state
    click.echo(f"Current streak: {s.current_streak} day(s) (longest {s.longest_streak})")
    click.echo(f"Weekly streak:  {s.weekly_streak} week(s)")
    click.echo(f"Freeze:         {'available' if s.freeze_available else 'used'}")
    click.echo(f"Status:         {ledger.status(datetime.now()).value}")


@main.command()
@click.argument("action", type=click.Choice(["list", "add", "assign", "default",
                                             "retire", "unretire", "correct", "remove"]))
@click.option("--store", "-s", default="ledgers.json", help="Ledger JSON file.")
@click.option("--id", "gear_ids", multiple=True, help="Gear id (repeat for several).")
@click.option("--name", default="", help="Gear name (add).")
@click.option("--target", type=float, default=800.0, help="Target mileage in km (add).")
@click.option("--initial", type=float, default=0.0, help="Initial mileage in km (add).")
@click.option("--run-id", default=None, help="Run id (assign).")
@click.option("--distance", type=float, default=None, help="Distance in km (assign, correct).")
def gear(action: str, store: str, gear_ids: tuple[str, ...], name: str, target: float,
         initial: float, run_id: str | None, distance: float | None) -> None:
    """List or update gear mileage."""
    from vitalcore.ledgers.gear import GearItem
    from vitalcore.ledgers.store import JsonLedgerStore

    ledger_store = JsonLedgerStore(store)
    ledger = ledger_store.load_gear()

    if action != "list":
        if action == "assign":
            if run_id is None or distance is None:
                raise click.UsageError("assign needs --run-id and --distance")
            result = ledger.assign_run(run_id, distance, list(gear_ids))
        else:
            if len(gear_ids) != 1:
                raise click.UsageError(f"{action} needs exactly one --id")
            gid = gear_ids[0]
            if action == "add":
                try:
                    item = GearItem(
                        id=gid, name=name or gid, purchase_date=date.today(),
                        initial_mileage=initial, total_mileage=initial, target_mileage=target,
                    )
                except ValueError as e:
                    raise click.BadParameter(str(e))
                result = ledger.add_gear(item)
            elif action == "default":
                result = ledger.set_default(gid)
            elif action == "retire":
                result = ledger.retire(gid)
            elif action == "unretire":
                result = ledger.unretire(gid)
            elif action == "correct":
                if distance is None:
                    raise click.UsageError("correct needs --distance")
                result = ledger.correct_mileage(gid, distance)
            else:
                result = ledger.remove_gear(gid)
        _echo_result(result)
        if result:
            ledger_store.save_gear(ledger)

    if not ledger.items:
        click.echo("No gear.")
    for g in ledger.items:
        flags = "".join([" [default]" if g.is_default else "",
                         " [retired]" if g.is_retired else ""])
        click.echo(
            f"  {g.id:<10} {g.name:<20} {g.total_mileage:7.1f}/{g.target_mileage:.0f} km  "
            f"{g.wear_percentage:5.1f}% {g.wear_status.value}{flags}"
        )


if __name__ == "__main__":
    main()
