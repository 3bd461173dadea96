"""
core.lineages
Playable origins (seed data) and the fixed starting values of a new game.

Pure data. core.effects / engine.pipeline project it into a GameState.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Tuple

from .state import NPC, Choice, Currency, NpcStatus, PlayerAttributes

START_AGE = 8
START_LUCK = 50
START_SEASON = "Primavera"
START_WEATHER = "Ensolarado"
START_INVENTORY: Tuple[str, ...] = ("Roupas simples",)
START_CHOICES: Tuple[Choice, ...] = (
    Choice("Explorar os arredores", "Pode encontrar algo útil"),
    Choice("Falar com sua família", "Melhora relacionamentos"),
    Choice("Descansar", "Recupera saúde"),
)


class UnknownLineageError(KeyError):
    pass


@dataclass(frozen=True)
class Lineage:
    id: int
    name: str
    icon: str
    kingdom: str
    description: str
    initial_attributes: PlayerAttributes
    initial_currency: Currency
    linked_npcs: Tuple[NPC, ...]
    initial_challenge: str

    @property
    def player_name(self) -> str:
        return self.name.split(" (")[0]


def _npc(npc_id: str, name: str, role: str, relationship: str, affinity: int) -> NPC:
    return NPC(id=npc_id, name=name, role=role, status=NpcStatus.ALIVE, relationship=relationship, affinity=affinity)


LINEAGES: Dict[int, Lineage] = {
    1: Lineage(
        id=1,
        name="Arthur/Isabel de Windsor (Filho/a do Rei)",
        icon="👑",
        kingdom="Inglaterra",
        description="Nobreza Real",
        initial_attributes=PlayerAttributes(health=80, strength=40, intelligence=70, wealth=200, honor=100),
        initial_currency=Currency(dinheiros=0, sous=0, libras=200),
        linked_npcs=(
            _npc("henrique", "Rei Henrique III", "Pai", "Pai", 80),
            _npc("eduardo", "Príncipe Eduardo", "Irmão", "Irmão", 60),
            _npc("eleanor", "Lady Eleanor", "Dama de companhia", "Aliada", 90),
        ),
        initial_challenge=(
            "Você acorda em seu quarto de castelo, cortinas de veludo vermelho. "
            "Seu servo Tomás entra ajoelhado: 'Meu príncipe/princesa — o Rei quer vê-lo(a) "
            "na sala do trono. Há assunto grave a discutir...'"
        ),
    ),
    2: Lineage(
        id=2,
        name="Jean/Marie Dubois (Plebeu Agricultor)",
        icon="🌾",
        kingdom="França",
        description="Agricultor",
        initial_attributes=PlayerAttributes(health=70, strength=65, intelligence=35, wealth=15, honor=25),
        initial_currency=Currency(dinheiros=50, sous=10, libras=0),
        linked_npcs=(
            _npc("pierre", "Pierre Dubois", "Pai", "Pai", 85),
            _npc("sophie", "Sophie Dubois", "Mãe", "Mãe", 95),
            _npc("lucas", "Lucas", "Amigo da vila", "Amigo", 70),
        ),
        initial_challenge=(
            "Você acorda no palheiro da sua casa, o cheiro de terra no ar. Sua mãe Sophie chama: "
            "'Jean/Marie! Acorde já — temos que plantar trigo antes que o sol esquente demais!'"
        ),
    ),
    3: Lineage(
        id=3,
        name="Klaus/Lena Weber (Sem Morada)",
        icon="🛤️",
        kingdom="Sacro Império Germânico",
        description="Mendigo",
        initial_attributes=PlayerAttributes(health=60, strength=55, intelligence=50, wealth=5, honor=10),
        initial_currency=Currency(dinheiros=10, sous=0, libras=0),
        linked_npcs=(
            _npc("gustav", "Gustav", "Amigo sem-teto", "Amigo", 80),
            _npc("brigida", "Brigida", "Mulher generosa", "Benfeitora", 50),
            _npc("heinrich", "Guardião Heinrich", "Guarda", "Inimigo", 10),
        ),
        initial_challenge=(
            "Você acorda em um beco escuro de Berlim, com frio nos ossos. Gustav chega correndo: "
            "'Cuidado! O guardião Heinrich está rondando os becos — vamos nos esconder na floresta!'"
        ),
    ),
    4: Lineage(
        id=4,
        name="Marco/Rosa Rossi (Filho/a de Bandido)",
        icon="⚔️",
        kingdom="Reino dos Papados",
        description="Bandido",
        initial_attributes=PlayerAttributes(health=75, strength=70, intelligence=45, wealth=35, honor=5),
        initial_currency=Currency(dinheiros=100, sous=20, libras=0),
        linked_npcs=(
            _npc("giovanni", "Giovanni Rossi", "Chefe do bando", "Pai", 75),
            _npc("carla", "Carla", "Parceira do bando", "Parceira", 85),
            _npc("antonio", "Guardião Antonio", "Guarda", "Inimigo", 0),
        ),
        initial_challenge=(
            "Você está acampado na floresta perto de Roma. Seu pai Giovanni bate na sua tenda: "
            "'Hoje temos uma boa oportunidade — uma carreta de mercadorias do bispo passa por aqui às três!'"
        ),
    ),
    5: Lineage(
        id=5,
        name="Fergus/Morag MacLeod (Mongês/a da Abadia)",
        icon="✝️",
        kingdom="Escócia",
        description="Religioso",
        initial_attributes=PlayerAttributes(health=65, strength=40, intelligence=80, wealth=20, honor=75),
        initial_currency=Currency(dinheiros=30, sous=5, libras=0),
        linked_npcs=(
            _npc("columba", "Abade Columba", "Líder da abadía", "Mestre", 80),
            _npc("duncan", "Irmão Duncan", "Amigo", "Amigo", 75),
            _npc("catriona", "Irmã Catriona", "Colega", "Colega", 70),
        ),
        initial_challenge=(
            "Você acorda na cela da abadía, ouvindo os sinos tocar. Abade Columba procura por você: "
            "'Fergus/Morag — temos um pergaminho antigo para decifrar. Pode ser a chave para curar "
            "a febre que aflige nossa vila...'"
        ),
    ),
}


def get_lineage(lineage_id: int) -> Lineage:
    try:
        return LINEAGES[int(lineage_id)]
    except (KeyError, TypeError, ValueError):
        raise UnknownLineageError(lineage_id) from None
