from typing import Iterable

import chess


def format_score(score: int, mate_score: int, mate_threshold: int) -> str:
    if abs(score) >= mate_threshold:
        mate_in = (mate_score - abs(score) + 1) // 2
        return f"mate {mate_in if score > 0 else -mate_in}"
    return f"cp {score}"


def format_info(d, score, nodes, elapsed_ms, pv_moves: Iterable[chess.Move], mate_score, mate_threshold) -> str:
    pv_str = " ".join(m.uci() for m in pv_moves)
    nps = int(nodes * 1000 / elapsed_ms) if elapsed_ms > 0 else 0
    score_str = format_score(score, mate_score, mate_threshold)
    return f"info depth {d} score {score_str} nodes {nodes} nps {nps} time {int(elapsed_ms)} pv {pv_str}"
