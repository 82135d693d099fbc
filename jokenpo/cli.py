from __future__ import annotations

import argparse
import asyncio
import logging
import random
from dataclasses import replace

from jokenpo.audio import AudioCall, InMemoryAudio
from jokenpo.config import settings_from_env
from jokenpo.controller import RoundController
from jokenpo.core.events import RoundResult
from jokenpo.core.moves import parse_move
from jokenpo.presentation import CallbackSink, PresentationCommand

PROMPT = "Sua jogada - (r)ock, (p)aper, (s)cissors, (reset), (music), (chant), (q)uit: "


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(prog="jokenpo")
    sub = parser.add_subparsers(dest="cmd", required=True)

    play = sub.add_parser("play", help="Play against the computer in the terminal")
    play.add_argument("--seed", type=int, default=None)
    play.add_argument("--delay-ms", type=int, default=None, help="Override the shake-to-reveal delay")
    play.add_argument("-v", "--verbose", action="store_true", help="Also print audio transport calls")

    serve = sub.add_parser("serve", help="Run the HTTP/WebSocket API")
    serve.add_argument("--host", default="127.0.0.1")
    serve.add_argument("--port", type=int, default=8000)

    args = parser.parse_args(argv)

    if args.cmd == "serve":
        import uvicorn

        uvicorn.run("jokenpo.main:app", host=args.host, port=args.port)
        return 0

    if args.cmd == "play":
        logging.basicConfig(level=logging.DEBUG if args.verbose else logging.WARNING)
        try:
            return asyncio.run(_play(seed=args.seed, delay_ms=args.delay_ms, verbose=args.verbose))
        except KeyboardInterrupt:
            print()
            return 0

    raise SystemExit("unhandled command")


def _print_command(command: PresentationCommand) -> None:
    f = command.fields
    if command.kind == "show_caption":
        print(f"  {f['text']}")
    elif command.kind == "show_headline":
        print(f"» {f['text']}")
    elif command.kind == "show_bubble" and f["text"] not in ("?", "..."):
        print(f"  [{f['side']}] {f['text']} {f['tag']}".rstrip())
    elif command.kind == "play_sound":
        print(f"  ♪ {f['name']}")


def _print_audio(call: AudioCall) -> None:
    print(f"  ~ {call.op} {call.track.value} {call.arg}".rstrip())


async def _play(*, seed: int | None, delay_ms: int | None, verbose: bool) -> int:
    settings = settings_from_env()
    if delay_ms is not None:
        settings = replace(settings, reveal_delay_ms=delay_ms)

    controller = RoundController(
        sink=CallbackSink(_print_command),
        audio=InMemoryAudio(on_call=_print_audio if verbose else None),
        rng=random.Random(seed),
        settings=settings,
    )

    loop = asyncio.get_running_loop()
    done: asyncio.Future[RoundResult] | None = None

    def _on_round(result: RoundResult) -> None:
        if done is not None and not done.done():
            done.set_result(result)

    controller.add_listener(_on_round)
    controller.start()

    while True:
        try:
            line = await loop.run_in_executor(None, input, PROMPT)
        except (EOFError, KeyboardInterrupt):
            # stdin closed (Ctrl-D, end of piped input): same as quitting.
            print()
            return 0
        raw = line.strip().casefold()
        if raw in ("q", "quit", "exit"):
            return 0
        if raw == "reset":
            controller.reset()
            continue
        if raw == "music":
            print("🎶 on" if controller.toggle_music() else "🎶 off")
            continue
        if raw == "chant":
            print(f"chant: {controller.toggle_chant_mode().value}")
            continue

        try:
            move = parse_move(raw)
        except ValueError as e:
            print(f"❌ {e}")
            continue

        done = loop.create_future()
        if controller.play_round(move):
            result = await done
            print(f"Placar: você {result.score_after[0]} x {result.score_after[1]} computador")


if __name__ == "__main__":
    raise SystemExit(main())
