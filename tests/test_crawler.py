# File: tests/test_crawler.py
# Site crawler tests: an in-memory fetcher replaces the network
from __future__ import annotations

import pytest

from lead_scout.config import DEFAULT_PATHS, ScoutConfig
from lead_scout.crawler.crawler import SiteCrawler

HOME = (
    "<html><body><p>Contato: (11) 4002-8922, cnpj 11.222.333/0001-81, "
    "email: contato@loja.com.br</p></body></html>"
)


async def run_crawl(config: ScoutConfig, fetcher, domain: str = "loja.com.br"):
    async with SiteCrawler(config, fetcher) as crawler:
        return await crawler.crawl(domain)


@pytest.mark.asyncio()
async def test_end_to_end_scenario(basic_config, fake_fetcher_factory):
    fetcher = fake_fetcher_factory({"https://loja.com.br/": HOME})
    result = await run_crawl(basic_config, fetcher)

    assert result.base_url == "https://loja.com.br"
    assert result.crawled_successfully is True
    assert result.emails == ["contato@loja.com.br"]
    assert result.phones == ["+551140028922"]
    assert result.identifier_candidates == ["11222333000181"]
    assert result.chosen_identifier == "11222333000181"


@pytest.mark.asyncio()
async def test_falls_back_to_www_variant(basic_config, fake_fetcher_factory):
    fetcher = fake_fetcher_factory({"https://www.loja.com.br/": HOME})
    result = await run_crawl(basic_config, fetcher)

    assert result.base_url == "https://www.loja.com.br"
    assert fetcher.calls[:2] == ["https://loja.com.br/", "https://www.loja.com.br/"]
    assert fetcher.calls[2] == "https://www.loja.com.br" + DEFAULT_PATHS[0]


@pytest.mark.asyncio()
async def test_probe_order_when_everything_fails(basic_config, fake_fetcher_factory):
    fetcher = fake_fetcher_factory({})
    result = await run_crawl(basic_config, fetcher)

    assert fetcher.calls[:4] == [
        "https://loja.com.br/",
        "https://www.loja.com.br/",
        "http://loja.com.br/",
        "http://www.loja.com.br/",
    ]
    # catalog still tried against the fallback label, each path once
    assert fetcher.calls[4:] == ["https://loja.com.br" + p for p in DEFAULT_PATHS]
    assert result.base_url == "https://loja.com.br"
    assert result.crawled_successfully is False
    assert result.emails == []
    assert result.phones == []
    assert result.chosen_identifier is None
    assert result.identifier_candidates == []


@pytest.mark.asyncio()
async def test_domain_is_normalized(basic_config, fake_fetcher_factory):
    fetcher = fake_fetcher_factory({"https://loja.com.br/": HOME})
    result = await run_crawl(basic_config, fetcher, domain="https://WWW.Loja.com.br/produtos")
    assert result.base_url == "https://loja.com.br"


@pytest.mark.asyncio()
async def test_catalog_pages_are_accumulated(basic_config, fake_fetcher_factory):
    fetcher = fake_fetcher_factory(
        {
            "https://loja.com.br/": "<html><body><h1>Loja Exemplo</h1>" + "." * 50 + "</body></html>",
            "https://loja.com.br/contato": "<p>Escreva para SAC@Loja.com.br</p>",
            "https://loja.com.br/politica-de-privacidade/": "<p>Loja Exemplo LTDA - CNPJ 11.222.333/0001-81</p>",
        }
    )
    result = await run_crawl(basic_config, fetcher)

    assert result.emails == ["sac@loja.com.br"]
    assert result.chosen_identifier == "11222333000181"


@pytest.mark.asyncio()
async def test_visited_urls_are_not_refetched(fake_fetcher_factory):
    config = ScoutConfig(paths=("/", "/contato", "/contato", "/contato#form"))
    home = '<html><body><a href="/contato">Fale conosco</a>' + "." * 50 + "</body></html>"
    fetcher = fake_fetcher_factory({"https://loja.com.br/": home})
    await run_crawl(config, fetcher)

    assert fetcher.calls == ["https://loja.com.br/", "https://loja.com.br/contato"]


@pytest.mark.asyncio()
async def test_discovered_links_are_followed(isolated_config, fake_fetcher_factory):
    home = (
        "<html><body>"
        '<a href="/paginas/politica-de-troca">Trocas</a>'
        '<a href="https://parceiro.com.br/contato">Parceiro</a>'
        '<a href="/produtos">Produtos</a>'
        "</body></html>"
    )
    fetcher = fake_fetcher_factory(
        {
            "https://loja.com.br/": home,
            "https://loja.com.br/paginas/politica-de-troca": "<footer>CNPJ 11.222.333/0001-81</footer>",
        }
    )
    result = await run_crawl(isolated_config, fetcher)

    assert fetcher.calls == ["https://loja.com.br/", "https://loja.com.br/paginas/politica-de-troca"]
    assert result.identifier_candidates == ["11222333000181"]


@pytest.mark.asyncio()
async def test_discovered_links_are_capped(fake_fetcher_factory):
    config = ScoutConfig(paths=(), max_extra_links=2)
    home = "".join(f'<a href="/termos-{i}">T{i}</a>' for i in range(6))
    fetcher = fake_fetcher_factory({"https://loja.com.br/": home})
    await run_crawl(config, fetcher)

    assert fetcher.calls == [
        "https://loja.com.br/",
        "https://loja.com.br/termos-0",
        "https://loja.com.br/termos-1",
    ]


@pytest.mark.asyncio()
async def test_no_link_discovery_without_home(isolated_config, fake_fetcher_factory):
    fetcher = fake_fetcher_factory({})
    result = await run_crawl(isolated_config, fetcher)

    assert len(fetcher.calls) == 4
    assert result.crawled_successfully is False


@pytest.mark.asyncio()
async def test_merchant_cnpj_beats_payment_processor(isolated_config, fake_fetcher_factory):
    filler = "<p>" + "x" * 400 + "</p>"
    home = (
        "<html><body>"
        f"{filler}<div>Pagamento seguro 99.888.777/0001-66</div>{filler}"
        "<footer>Loja Exemplo LTDA - CNPJ: 11.222.333/0001-81 - Rua A, 100</footer>"
        "</body></html>"
    )
    fetcher = fake_fetcher_factory({"https://loja.com.br/": home})
    result = await run_crawl(isolated_config, fetcher)

    assert result.identifier_candidates == ["99888777000166", "11222333000181"]
    assert result.chosen_identifier == "11222333000181"


@pytest.mark.asyncio()
async def test_whatsapp_and_tel_links_come_from_raw_markup(isolated_config, fake_fetcher_factory):
    home = (
        "<html><body>"
        '<a href="https://wa.me/5511999998888">Chame no WhatsApp</a>'
        '<a href="tel:08001234567">SAC</a>'
        "</body></html>"
    )
    fetcher = fake_fetcher_factory({"https://loja.com.br/": home})
    result = await run_crawl(isolated_config, fetcher)

    assert "+5511999998888" in result.phones
    assert "08001234567" in result.phones


@pytest.mark.asyncio()
async def test_crawl_requires_context(basic_config):
    crawler = SiteCrawler(basic_config)
    with pytest.raises(RuntimeError):
        await crawler.crawl("loja.com.br")
