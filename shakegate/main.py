from __future__ import annotations

import asyncio
import contextlib
from dataclasses import dataclass
from datetime import timedelta
from pathlib import Path

import click

from shakegate.banking.account import Account
from shakegate.banking.transfer import TransferFlow
from shakegate.config import ShakegateSettings, load_config
from shakegate.core.logging import setup_logging
from shakegate.errors import InvalidInputError, LockedOutError, NotAuthenticatedError
from shakegate.feedback import LoggingFeedbackDevice
from shakegate.formatting import format_amount, format_remaining
from shakegate.gates.login import LoginGate
from shakegate.models.motion import ShakeSample
from shakegate.models.transfer import PinVerdict
from shakegate.models.verification import SessionOutcome, SessionState
from shakegate.motion.hub import SensorHub
from shakegate.motion.replay import load_samples, replay_samples
from shakegate.persistence.kv_store import SQLiteKeyValueStore
from shakegate.persistence.lockout_store import LockoutStore

_DEFAULT_CONFIG = "config/shakegate.yaml"


@dataclass(slots=True)
class Runtime:
    settings: ShakegateSettings
    store: LockoutStore
    gate: LoginGate
    account: Account
    hub: SensorHub
    feedback: LoggingFeedbackDevice
    flow: TransferFlow


def build_runtime(settings: ShakegateSettings) -> Runtime:
    """Wire the process-wide lockout store into the login gate and transfer flow."""
    kv = SQLiteKeyValueStore(settings.db_path, namespace=settings.lockout.namespace)
    store = LockoutStore(
        kv,
        max_failed_attempts=settings.lockout.max_failed_attempts,
        lockout_duration=timedelta(seconds=settings.lockout.lockout_duration_s),
    )
    gate = LoginGate(store, pin=settings.login.pin)
    account = Account(settings.account.initial_balance)
    hub = SensorHub()
    feedback = LoggingFeedbackDevice()
    flow = TransferFlow(
        account,
        gate,
        store,
        hub,
        feedback,
        time_limit_s=settings.verification.time_limit_s,
        tick_interval_s=settings.verification.tick_interval_s,
    )
    return Runtime(
        settings=settings,
        store=store,
        gate=gate,
        account=account,
        hub=hub,
        feedback=feedback,
        flow=flow,
    )


def _load_settings(config_path: str) -> ShakegateSettings:
    path = Path(config_path)
    if not path.exists() and config_path == _DEFAULT_CONFIG:
        return ShakegateSettings()
    try:
        return load_config(path)
    except (FileNotFoundError, ValueError) as exc:
        raise click.ClickException(str(exc)) from exc


def _prepare(config_path: str) -> Runtime:
    settings = _load_settings(config_path)
    setup_logging(settings.logging.level, json_output=settings.logging.json_output)
    return build_runtime(settings)


def _login(runtime: Runtime, pin: str) -> PinVerdict:
    verdict: PinVerdict | None = None
    for digit in pin:
        verdict = runtime.gate.enter_digit(digit)
        if verdict is not None:
            break
    if verdict is None:
        raise click.ClickException(f"PIN must have {runtime.gate.pin_length} digits")
    return verdict


async def _verify_with_trace(
    runtime: Runtime,
    amount: str,
    samples: list[ShakeSample],
    speed: float,
) -> SessionOutcome:
    session = runtime.flow.request_transfer(amount)
    click.echo(f"Shake required: {session.target_count} within {session.remaining_seconds}s")
    replay = asyncio.create_task(replay_samples(runtime.hub, samples, speed=speed))
    try:
        return await session.wait()
    finally:
        session.close()
        replay.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await replay


@click.group()
def cli() -> None:
    """Shake-verified transfer demo."""


@cli.command("status")
@click.option("--config", "config_path", default=_DEFAULT_CONFIG, show_default=True)
def status_command(config_path: str) -> None:
    runtime = _prepare(config_path)
    state = runtime.store.state()
    remaining = runtime.store.remaining()
    if remaining > timedelta(0):
        click.echo(f"Account locked. Try again in {format_remaining(remaining)}")
        return
    click.echo(
        f"Unlocked (failed attempts: {state.failed_attempts}/{runtime.store.max_failed_attempts})"
    )


@cli.command("login")
@click.argument("pin")
@click.option("--config", "config_path", default=_DEFAULT_CONFIG, show_default=True)
def login_command(pin: str, config_path: str) -> None:
    runtime = _prepare(config_path)
    try:
        verdict = _login(runtime, pin)
    except (LockedOutError, InvalidInputError) as exc:
        raise click.ClickException(str(exc)) from exc
    if verdict == PinVerdict.rejected:
        raise click.ClickException("Incorrect PIN")
    click.echo("PIN accepted")


@cli.command("transfer")
@click.argument("amount")
@click.option("--pin", required=True, help="Login PIN.")
@click.option(
    "--samples",
    "samples_path",
    required=True,
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="JSON Lines accelerometer trace to replay.",
)
@click.option("--speed", default=1.0, show_default=True, help="Replay speed; 0 = no delays.")
@click.option("--config", "config_path", default=_DEFAULT_CONFIG, show_default=True)
def transfer_command(
    amount: str,
    pin: str,
    samples_path: Path,
    speed: float,
    config_path: str,
) -> None:
    runtime = _prepare(config_path)
    try:
        samples = load_samples(samples_path)
        if _login(runtime, pin) == PinVerdict.rejected:
            raise click.ClickException("Incorrect PIN")
        outcome = asyncio.run(_verify_with_trace(runtime, amount, samples, speed))
    except (LockedOutError, InvalidInputError, NotAuthenticatedError) as exc:
        raise click.ClickException(str(exc)) from exc

    balance = format_amount(runtime.account.balance)
    if outcome.state == SessionState.success:
        sent = format_amount(runtime.flow.results[-1].amount)
        click.echo(f"Transfer successful! {sent} sent. Balance: {balance}")
        return
    raise click.ClickException(f"Transaction Failed ({outcome.reason}). Balance: {balance}")


__all__ = ["Runtime", "build_runtime", "cli"]
