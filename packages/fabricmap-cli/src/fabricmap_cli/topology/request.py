from typing import Any, Optional

import click
import yaml
from fabricmap_core.data import load_request
from fabricmap_core.errors import TopologyError
from fabricmap_core.models import ComputeInstances, EngineSpec, ProviderSpec, TopologyRequest
from fabricmap_core.topology import expand
from pydantic import ValidationError


def request_options(fn):
    """Options shared by every command that builds a topology request."""
    options = [
        click.option(
            "--request",
            "request_path",
            type=click.Path(path_type=str, dir_okay=False, exists=True),
            help="Topology request YAML/JSON (provider, engine, nodes). Options below override it.",
        ),
        click.option("--provider", type=str, help="Provider name, e.g. crusoe, crusoe-sim, sim."),
        click.option(
            "--model-file",
            type=click.Path(path_type=str, dir_okay=False, exists=False),
            help="Simulation model YAML for the *-sim providers.",
        ),
        click.option(
            "--param",
            "params",
            multiple=True,
            metavar="KEY=VALUE",
            help="Provider parameter; VALUE is parsed as YAML (repeatable).",
        ),
        click.option("--page-size", type=click.IntRange(min=1), help="Maximum instances per leaf switch."),
        click.option(
            "--instances",
            type=str,
            help="Only include these instances (comma separated, range expressions allowed).",
        ),
        click.option("--region", type=str, default="local", show_default=True, help="Region of --instances."),
    ]
    for option in reversed(options):
        fn = option(fn)
    return fn


def parse_params(params: tuple[str, ...]) -> dict[str, Any]:
    out: dict[str, Any] = {}
    for item in params:
        key, sep, value = item.partition("=")
        if not sep or not key.strip():
            raise TopologyError.request(f"invalid --param {item!r}, expected KEY=VALUE")
        try:
            out[key.strip()] = yaml.safe_load(value)
        except yaml.YAMLError as e:
            raise TopologyError.request(f"invalid value for --param {key!r}: {e}") from e
    return out


def build_request(
    request_path: Optional[str],
    provider: Optional[str],
    model_file: Optional[str],
    params: tuple[str, ...],
    page_size: Optional[int],
    instances: Optional[str],
    region: str,
    engine_params: Optional[dict[str, Any]] = None,
) -> TopologyRequest:
    """Merge a request document with command line overrides."""
    try:
        if request_path:
            request = load_request(request_path)
        elif provider:
            request = TopologyRequest(provider=ProviderSpec(name=provider))
        else:
            raise TopologyError.request("either --request or --provider is required")

        if provider:
            request.provider.name = provider
        if model_file:
            request.provider.model_file = model_file
        request.provider.params.update(parse_params(params))
        if page_size is not None:
            request.page_size = page_size
        if instances:
            ids = expand(instances)
            request.nodes = [ComputeInstances(region=region, instances={i: i for i in ids})]
        if engine_params:
            request.engine = EngineSpec(name=request.engine.name, params={**request.engine.params, **engine_params})
    except (OSError, ValueError, ValidationError) as e:
        raise TopologyError.request(str(e)) from e

    return request
