"""content.prompts

Prompt builders for the narrative oracle.

The model narrates and proposes deltas; clamping and merging stay in
core.effects. Every turn prompt carries the full state snapshot so the
model has no hidden memory to rely on.
"""

from __future__ import annotations

from typing import List

from core.state import ATTRIBUTE_LABELS, Choice, GameState

IMAGE_STYLE_PREFIX = "Realistic medieval art style, high detail, historical accuracy: "
NARRATION_PREFIX = "Narre com uma voz solene e medieval: "


def describe_npcs(state: GameState) -> str:
    if not state.npcs:
        return "(nenhum)"
    return ", ".join(
        f"{n.name} [id={n.id}] ({n.role}, Status: {n.status.value}, Afinidade: {n.affinity})" for n in state.npcs
    )


def describe_state(state: GameState) -> str:
    p = state.player
    a = p.attributes
    c = p.currency
    inventory = ", ".join(p.inventory) if p.inventory else "(vazio)"
    lines: List[str] = [
        f"- Jogador: {p.name}, {p.age} anos, Reino: {p.kingdom}",
        (
            f"- Atributos: {ATTRIBUTE_LABELS['health']} {a.health}, {ATTRIBUTE_LABELS['strength']} {a.strength}, "
            f"{ATTRIBUTE_LABELS['intelligence']} {a.intelligence}, {ATTRIBUTE_LABELS['wealth']} {a.wealth}, "
            f"{ATTRIBUTE_LABELS['honor']} {a.honor}"
        ),
        f"- Economia: {c.libras} libras, {c.sous} sous, {c.dinheiros} dinheiros",
        f"- Inventário: {inventory}",
        f"- Sorte Atual: {p.luck}/100",
        f"- Dia {state.day}, {state.season}. Clima: {state.weather}",
        f"- NPCs: {describe_npcs(state)}",
    ]
    return "\n".join(lines)


def build_opening_prompt(*, lineage_name: str, challenge: str, age: int) -> str:
    return f"""
Você é o narrador de um jogo de RPG medieval realista chamado "Vida Medieval".
O jogador escolheu a linhagem: {lineage_name}.
O desafio inicial é: {challenge}.
Escreva uma introdução imersiva em português para o primeiro dia de vida do jogador (ele tem {int(age)} anos).
Foque no clima, no ambiente e na urgência do desafio. Seja dramático e realista.

Também forneça um prompt em inglês para gerar uma imagem ilustrativa desta cena inicial.
O prompt deve ser descritivo e focado no estilo artístico medieval realista.

Responda em JSON com os campos "story" e "imagePrompt".
""".strip()


def build_turn_prompt(*, state: GameState, choice: Choice) -> str:
    """Outcome prompt: full snapshot + the chosen action. JSON only."""
    return f"""
Você é o Game Master de "Vida Medieval".
Estado Atual:
{describe_state(state)}
- História até agora: {state.current_story}
- Escolha do Jogador: "{choice.text}"

Gere o resultado desta escolha considerando os sistemas:
1. Relacionamentos: Ações afetam afinidade. NPCs podem mudar de status. Use apenas os ids listados.
2. Saúde: Saúde baixa causa doenças. Lesões podem ser permanentes. Saúde 0 significa morte.
3. Economia: Use dinheiros, sous e libras. Preços variam.
4. Sorte: Sorte influencia o sucesso.
5. Ambiente: O clima e o tempo (dias/semanas) devem avançar. timePassedDays nunca é negativo.
6. Escolhas: Ofereça de 2 a 4 novas escolhas com uma dica de consequência.
7. Imagem: Forneça um prompt em inglês para uma imagem ilustrativa do resultado.

Responda estritamente em JSON.
""".strip()


def build_image_prompt(prompt: str) -> str:
    return IMAGE_STYLE_PREFIX + str(prompt or "").strip()


def build_narration_prompt(text: str) -> str:
    return NARRATION_PREFIX + str(text or "").strip()


def build_json_repair_prompt(broken_text: str) -> str:
    broken_text = str(broken_text or "")
    return f"""O texto abaixo contém JSON inválido. Sua tarefa: devolver SOMENTE JSON válido.
- Não adicione comentários nem markdown.
- Não renomeie campos, apenas corrija.
- Corrija vírgulas, aspas e chaves faltando.

TEXTO QUEBRADO:
{broken_text}
""".strip()
