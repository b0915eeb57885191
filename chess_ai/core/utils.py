import logging

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def configure_logging(level: str = "INFO"):
    logging.basicConfig(level=getattr(logging, level.upper(), logging.INFO), format=LOG_FORMAT)


def format_info(depth, score, nodes, elapsed, pv_moves):
    pv_str = " ".join(m.uci() for m in pv_moves)
    nps = int(nodes / elapsed) if elapsed > 0 else 0
    return f"info depth {depth} score cp {score} nodes {nodes} nps {nps} time {int(elapsed * 1000)} pv {pv_str}"
