import argparse
import asyncio
import logging

from llmchess_duel.config import SETTINGS
from llmchess_duel.providers import provider_config
from llmchess_duel.session import ConfigurationError, SessionController


async def run(args, log: logging.Logger) -> int:
    api_key = args.api_key if args.api_key is not None else SETTINGS.llm_api_key
    white = provider_config(args.white, api_key)
    black = provider_config(args.black, api_key)
    controller = SessionController(
        turn_delay_s=args.turn_delay,
        think_delay_s=args.think_delay,
        max_plies=args.max_plies,
    )

    if args.verify_key:
        for cfg in {c.model: c for c in (white, black) if c.is_remote}.values():
            failure = await controller.verify_credential(cfg)
            if failure:
                log.error("Key test failed for %s: %s", cfg.label(), failure.describe())
                return 2

    try:
        summary = await controller.play(white, black)
    except ConfigurationError as e:
        log.error("Cannot start game: %s", e)
        return 2

    print("Result:", summary.result)
    print("Termination:", summary.termination)
    print("Plies:", summary.plies)
    print("PGN:\n", summary.pgn)

    if args.pgn_out:
        with open(args.pgn_out, "w", encoding="utf-8") as f:
            f.write(summary.pgn)
        log.info("Wrote PGN to %s", args.pgn_out)
    return 1 if summary.failure else 0


if __name__ == "__main__":
    ap = argparse.ArgumentParser(description="Play one game between two move providers.")
    ap.add_argument("--white", default="random", help="White provider: random, gpt-4, gemini-pro, openai/<model>, gemini/<model>")
    ap.add_argument("--black", default="random", help="Black provider (same choices as --white)")
    ap.add_argument("--api-key", default=None, help="API key shared by remote providers (defaults to LLMCHESS_LLM_API_KEY)")
    ap.add_argument("--verify-key", action="store_true", help="Probe each remote provider before starting")
    ap.add_argument("--max-plies", type=int, default=None, help="Stop as a draw after this many plies (0 = unlimited)")
    ap.add_argument("--turn-delay", type=float, default=None, help="Seconds between turns")
    ap.add_argument("--think-delay", type=float, default=None, help="Seconds the random mover 'thinks'")
    ap.add_argument("--pgn-out", default=None, help="Optional path to write PGN at end")
    ap.add_argument("--log-level", default="INFO", help="Python logging level (e.g., INFO, DEBUG)")
    args = ap.parse_args()

    logging.basicConfig(level=getattr(logging, args.log_level.upper(), logging.INFO), format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    raise SystemExit(asyncio.run(run(args, logging.getLogger("play_one"))))
