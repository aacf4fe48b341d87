"""Composição do pricelist e dos dados de checkout no startup."""

from __future__ import annotations

from menubot.config.settings import (
    PAYMENT_CANCEL_PATH,
    PAYMENT_NOTIFY_PATH,
    PAYMENT_RETURN_PATH,
    EnvironmentConfig,
)
from menubot.domain.catalogue import CheckoutInfo, Pricelist, compose_selections
from menubot.infra.catalogue_repository import SqlCatalogueRepository


def load_pricelist(repository: SqlCatalogueRepository, config: EnvironmentConfig) -> Pricelist:
    """Lê o catálogo configurado e numera os itens.

    Raises:
        CatalogueLoadError: falha de leitura do catálogo
    """
    items = repository.load_items(config.catalogue_id)
    return Pricelist(preamble=config.pricelist_preamble, catalogue=compose_selections(items))


def build_checkout_info(config: EnvironmentConfig) -> CheckoutInfo:
    """URLs públicas dos webhooks + credenciais do comerciante."""
    return CheckoutInfo(
        return_url=config.public_url(PAYMENT_RETURN_PATH),
        cancel_url=config.public_url(PAYMENT_CANCEL_PATH),
        notify_url=config.public_url(PAYMENT_NOTIFY_PATH),
        merchant_id=config.merchant_id,
        merchant_key=config.merchant_key,
        passphrase=config.passphrase,
        host_url=config.pf_host,
        item_name_prefix=config.item_name_prefix,
    )
