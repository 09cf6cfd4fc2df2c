#!/usr/bin/env python
"""CLI entry point for llm_tools."""

import asyncio
from dataclasses import replace
from typing import Optional

import click

from llm_tools.config import load_settings, validate_settings
from llm_tools.dependencies import build_app_state
from llm_tools.errors import ConfigurationError, LLMToolsError
from llm_tools.logging_setup import parse_level, setup_logging
from llm_tools.rag.samples import seed_sample_documents


@click.group()
def cli():
    """LLM Tools - prompt templates, retrieval and step chains over an LLM backend."""
    pass


@cli.command()
@click.option("--query", type=str, default="", help="Query text")
@click.option("--template", type=str, default="qa", help="Prompt template (simple mode)")
@click.option("--model", type=str, default=None, help="Model id (default: OPENAI_MODEL)")
@click.option("--api-key", type=str, default=None, help="OpenAI API key override")
@click.option("--base-url", type=str, default=None, help="OpenAI base URL override")
@click.option("--chain", "chain_mode", is_flag=True, help="Use retrieve -> prompt -> chat chain")
@click.option("--verbose", is_flag=True, help="Show prompt and token usage")
def query(
    query: str,
    template: str,
    model: Optional[str],
    api_key: Optional[str],
    base_url: Optional[str],
    chain_mode: bool,
    verbose: bool,
):
    """Answer a query in simple (template) or chain (retrieval) mode."""
    if not query:
        click.echo("Please provide a query with --query")
        return

    settings = load_settings()
    if api_key:
        settings = replace(settings, openai_api_key=api_key)
    if base_url:
        settings = replace(settings, openai_base_url=base_url)

    try:
        validate_settings(settings)
    except ConfigurationError as e:
        raise click.ClickException(f"Invalid config: {e}")

    setup_logging(settings.log_level, settings.log_file)
    state = build_app_state(settings)

    async def run():
        await seed_sample_documents(state.retriever)
        service = state.chat_service

        if chain_mode:
            return await service.run_chain(query, model=model)

        if verbose:
            prompt = state.prompt_engine.render(template, {"question": query})
            click.echo(f"Template: {template}")
            click.echo(f"Prompt:\n{prompt}")
        return await service.run_simple(query, template=template, model=model)

    try:
        result = asyncio.run(run())
    except LLMToolsError as e:
        raise click.ClickException(str(e))

    click.echo(f"Query: {result.query}")
    click.echo(f"Answer: {result.answer}")
    if verbose and not chain_mode:
        click.echo(f"Token usage: {result.token_usage}")


@cli.command()
def templates():
    """List the built-in templates and their variables."""
    state = build_app_state(load_settings())
    engine = state.prompt_engine
    for name in sorted(engine.list_templates()):
        template = engine.get_template(name)
        click.echo(f"{name} (v{template.version}): {', '.join(template.variables)}")


@cli.command()
@click.option("--host", type=str, default=None, help="Bind host (default: SERVER_HOST)")
@click.option("--port", type=int, default=None, help="Bind port (default: SERVER_PORT)")
def serve(host: Optional[str], port: Optional[int]):
    """Run the HTTP API with uvicorn."""
    import uvicorn

    from llm_tools.main import create_app

    settings = load_settings()
    try:
        validate_settings(settings)
    except ConfigurationError as e:
        raise click.ClickException(f"Invalid config: {e}")

    app = create_app(settings)
    uvicorn.run(
        app,
        host=host or settings.server_host,
        port=port or settings.server_port,
        log_level=parse_level(settings.log_level),
    )


if __name__ == "__main__":
    cli()
