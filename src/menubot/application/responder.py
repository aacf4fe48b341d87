"""Motor de conversa padrão: responde com o pricelist ou com o item escolhido."""

from __future__ import annotations

from menubot.domain.conversation import ConversationContext, ConversationEngine


class PricelistResponder(ConversationEngine):
    """Motor mínimo: número válido cota o item; qualquer outro texto devolve o pricelist.

    O motor de pedidos completo (carrinho, pagamento) pluga no mesmo contrato.
    """

    def generate_reply(self, context: ConversationContext) -> str:
        text = context.text.strip()
        if text.isdigit():
            selection = context.pricelist.find(int(text))
            if selection is not None:
                item_name = f"{context.checkout.item_name_prefix} {selection.item.name}"
                return (
                    f"{item_name}: R{selection.item.unit_price:.2f} per {selection.item.unit}.\n"
                    f"Reply with another number or any text to see the pricelist again."
                )
        return context.pricelist.render()
