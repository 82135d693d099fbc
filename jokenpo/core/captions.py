from __future__ import annotations

import random
from collections.abc import Sequence
from typing import TypeVar

from jokenpo.core.moves import Outcome

T = TypeVar("T")


IDLE_CAPTION = "Escolha sua jogada!"
IDLE_HEADLINE = "Faça sua escolha"
SHAKE_HEADLINE = "Preparando..."

SHAKE_EMOJIS: tuple[str, ...] = ("👊🤝", "✊✊", "✊", "✊✋", "👏👏")

WIN_CAPTIONS: tuple[str, ...] = (
    "🎉 Você venceu! Está mandando muito bem… consegue repetir a façanha?",
    "🏆 Parabéns, campeão! Mas será que mantém essa sequência?",
    "💪 Você é bom mesmo! Consegue embalar uma sequência?",
    "⚔️ Você é sortudo viu! Devia jogar na loteria.",
    "🔥 Você arrasou! Mas será que consegue vencer de novo?",
)

LOSE_CAPTIONS: tuple[str, ...] = (
    "💥 Você perdeu! Mas não desista, tente outra jogada.",
    "😅 Derrota dura… será que consegue virar o jogo?",
    "👊 Caiu agora, mas pode levantar mais forte!",
    "😞 O computador venceu desta vez… revanche?",
    "⚡ Não foi dessa vez, mas a próxima pode ser sua!",
)

DRAW_CAPTIONS: tuple[str, ...] = (
    "⚖️ Empate!",
    "😎 Igualdade total… bora desempatar?",
    "⚔️ Ninguém venceu… prepare-se para a próxima!",
    "🌀 Empate! A disputa continua acirrada.",
    "🎲 Empatou! Hora de tentar novamente.",
)

SUDDEN_DEATH_CAPTIONS: tuple[str, ...] = (
    "⚡ Tudo ou nada: quem vencer agora será o grande campeão!",
    "⚡ A próxima jogada decide tudo... o campeão está prestes a surgir!",
    "⚡ Suspense total! O próximo ponto coroa o vencedor!",
    "⚡ É o momento da verdade: quem ganhar agora leva o título!",
    "⚡ Última batalha! Só mais uma vitória e o campeão será revelado!",
    "⚡ O próximo a vencer escreve seu nome na glória!",
)

PLAYER_MATCH_POINT_CAPTION = "⚡ Falta só 1 vitória pra fechar!"
OPPONENT_MATCH_POINT_CAPTION = "⚡ E só falta 1 vitória pra ele fechar!"
PLAYER_CHAMPION_CAPTION = "🏆 Você venceu a partida!"
OPPONENT_CHAMPION_CAPTION = "💀 Game Over! O computador venceu."

HEADLINES: dict[Outcome, str] = {
    Outcome.draw: "Empate!",
    Outcome.player_wins: "Você ganhou!",
    Outcome.opponent_wins: "Você perdeu!",
}

CAPTION_POOLS: dict[Outcome, tuple[str, ...]] = {
    Outcome.draw: DRAW_CAPTIONS,
    Outcome.player_wins: WIN_CAPTIONS,
    Outcome.opponent_wins: LOSE_CAPTIONS,
}

# Scene art is keyed by category from the player's point of view.
SCENE_CATEGORIES: dict[Outcome, str] = {
    Outcome.draw: "draw",
    Outcome.player_wins: "win",
    Outcome.opponent_wins: "lose",
}

INITIAL_SCENE = "assets/images/scene-initial.png"

SCENE_IMAGES: dict[str, tuple[str, ...]] = {
    category: tuple(f"assets/images/scene-{category}-{n}.png" for n in (1, 2, 3))
    for category in ("win", "draw", "lose")
}


def pick_variant(pool: Sequence[T], rng: random.Random) -> T:
    if not pool:
        raise ValueError("Cannot pick from an empty pool")
    return rng.choice(pool)


def shake_caption(rng: random.Random) -> str:
    return f"{pick_variant(SHAKE_EMOJIS, rng)} Sacudindo as mãos..."


def outcome_caption(outcome: Outcome, rng: random.Random) -> str:
    return pick_variant(CAPTION_POOLS[outcome], rng)


def scene_for(outcome: Outcome, rng: random.Random) -> tuple[str, str]:
    """Return (category, image path) for the scene art of a resolved round."""

    category = SCENE_CATEGORIES[outcome]
    return category, pick_variant(SCENE_IMAGES[category], rng)
