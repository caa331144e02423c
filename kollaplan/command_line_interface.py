# SPDX-License-Identifier: GPL-3.0-or-later
# This file is part of KollaPlan.
#
# KollaPlan is free software: you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation, either version 3 of the License, or
# (at your option) any later version.
#
# KollaPlan is distributed in the hope that it will be useful,
# but WITHOUT ANY WARRANTY; without even the implied warranty of
# MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE.  See the
# GNU General Public License for more details.
#
# You should have received a copy of the GNU General Public License
# along with KollaPlan.  If not, see <https://www.gnu.org/licenses/>.

"""命令行接口。"""
from __future__ import annotations

import os
from pathlib import Path

import typer
from rich.console import Console
from rich.table import Table

from .common.config import load_config
from .common.logging_config import setup_logging
from .core.allocation.allocator import create_new_node
from .core.planning.app_state import AddNode, AppState, RemoveNode, UpdateNode, add_default_node, reduce
from .core.planning.node_editor import change_node_type
from .core.reporting.inventory import render_globals, render_lvm_commands, render_multinode_inventory
from .core.reporting.specification import build_system_specification
from .core.validation.validator import validate
from .integrations.plan_file import PlanDocument, PlanFileError, load_plan, save_plan, write_sample_plan
from .models import Node, NodeType, Severity


def _is_en() -> bool:
    lang = os.environ.get("KOLLAPLAN_LANG", "").lower()
    return lang.startswith("en")


def _t(cn: str, en: str) -> str:
    return en if _is_en() else cn


app = typer.Typer(help=_t("KollaPlan 多节点部署规划 CLI", "KollaPlan multi-node deployment planner CLI"))
console = Console()

_SEVERITY_STYLE = {
    Severity.passed: "green",
    Severity.fail: "red",
    Severity.info: "yellow",
}


def _bootstrap() -> dict:
    cfg = load_config()
    setup_logging(cfg.get("logging", {}).get("level", "INFO"))
    return cfg


def _resolve_plan(plan: Path | None, cfg: dict) -> Path:
    if plan is not None:
        return plan
    return Path.cwd() / cfg.get("plan", {}).get("file", "kolla-plan.yml")


def _load_state(path: Path) -> AppState:
    try:
        document = load_plan(path)
    except PlanFileError as exc:
        console.print(f"[red]{exc}[/red]")
        raise typer.Exit(code=1) from exc
    return AppState(nodes=tuple(document.nodes), network_config=document.network_config)


def _save_state(state: AppState, path: Path) -> None:
    save_plan(PlanDocument(nodes=list(state.nodes), network_config=state.network_config), path)


def _find_node(state: AppState, ref: str) -> Node:
    node = state.find_node(ref) or next((n for n in state.nodes if n.hostname == ref), None)
    if node is None:
        console.print(_t(f"[red]未找到节点: {ref}[/red]", f"[red]Node not found: {ref}[/red]"))
        raise typer.Exit(code=1)
    return node


@app.command()
def init(
    plan: Path | None = typer.Option(None, help=_t("规划文件路径", "Plan file path")),
    force: bool = typer.Option(False, "--force", help=_t("覆盖已存在的文件", "Overwrite an existing file")),
):
    """写入参考部署规划（四节点示例）。"""
    cfg = _bootstrap()
    path = _resolve_plan(plan, cfg)
    if path.exists() and not force:
        console.print(_t(
            f"[red]{path} 已存在，使用 --force 覆盖[/red]",
            f"[red]{path} already exists; use --force to overwrite[/red]",
        ))
        raise typer.Exit(code=1)
    write_sample_plan(path)
    console.print(f"[green]{_t('已生成规划文件', 'Plan written')}:[/] {path}")


@app.command("validate")
def validate_plan(
    plan: Path | None = typer.Option(None, help=_t("规划文件路径", "Plan file path")),
    as_json: bool = typer.Option(False, "--json", help=_t("输出 JSON", "Emit JSON")),
):
    """校验规划文件，配置无效时退出码为 2。"""
    cfg = _bootstrap()
    state = _load_state(_resolve_plan(plan, cfg))
    result = validate(state.nodes, state.network_config)

    if as_json:
        console.print_json(data=result.model_dump(mode="json", by_alias=True))
    else:
        table = Table(title=result.message)
        table.add_column(_t("级别", "Severity"))
        table.add_column(_t("规则", "Rule"))
        table.add_column(_t("明细", "Detail"))
        for item in result.diagnostics:
            style = _SEVERITY_STYLE[item.severity]
            table.add_row(f"[{style}]{item.severity.value}[/{style}]", item.rule, item.message)
        console.print(table)

    if not result.is_valid:
        raise typer.Exit(code=2)


@app.command("add-node")
def add_node(
    node_type: NodeType | None = typer.Option(None, "--type", help=_t("节点类型，缺省为 hybrid(compute)", "Node type, defaults to hybrid(compute)")),
    plan: Path | None = typer.Option(None, help=_t("规划文件路径", "Plan file path")),
):
    """追加节点，自动分配主机名与地址。"""
    cfg = _bootstrap()
    path = _resolve_plan(plan, cfg)
    state = _load_state(path)
    if node_type is None:
        state = add_default_node(state)
    else:
        state = reduce(state, AddNode(create_new_node(node_type, state.network_config, state.nodes)))
    _save_state(state, path)
    node = state.nodes[-1]
    console.print_json(data=node.model_dump(mode="json", by_alias=True, exclude_none=True))


@app.command("remove-node")
def remove_node(
    node: str = typer.Argument(..., help=_t("节点 ID 或主机名", "Node id or hostname")),
    plan: Path | None = typer.Option(None, help=_t("规划文件路径", "Plan file path")),
):
    """删除节点。"""
    cfg = _bootstrap()
    path = _resolve_plan(plan, cfg)
    state = _load_state(path)
    target = _find_node(state, node)
    _save_state(reduce(state, RemoveNode(target.id)), path)
    console.print(_t(f"[green]已删除节点 {target.display_name}[/green]", f"[green]Removed node {target.display_name}[/green]"))


@app.command("set-type")
def set_type(
    node: str = typer.Argument(..., help=_t("节点 ID 或主机名", "Node id or hostname")),
    node_type: NodeType = typer.Argument(..., help=_t("新的节点类型", "New node type")),
    plan: Path | None = typer.Option(None, help=_t("规划文件路径", "Plan file path")),
):
    """修改节点类型，重新分配主机名与地址并清理不兼容的网卡/磁盘。"""
    cfg = _bootstrap()
    path = _resolve_plan(plan, cfg)
    state = _load_state(path)
    target = _find_node(state, node)
    updated = change_node_type(target, node_type, state.network_config, state.nodes)
    _save_state(reduce(state, UpdateNode(target.id, updated)), path)
    console.print_json(data=updated.model_dump(mode="json", by_alias=True, exclude_none=True))


@app.command()
def spec(plan: Path | None = typer.Option(None, help=_t("规划文件路径", "Plan file path"))):
    """输出硬件规格、网络需求与部署建议。"""
    cfg = _bootstrap()
    state = _load_state(_resolve_plan(plan, cfg))
    console.print_json(data=build_system_specification(state.nodes, state.network_config).to_dict())


@app.command()
def inventory(
    plan: Path | None = typer.Option(None, help=_t("规划文件路径", "Plan file path")),
    with_globals: bool = typer.Option(False, "--globals", help=_t("同时输出 globals.yml 片段", "Also print the globals.yml fragment")),
):
    """输出 multinode inventory（可附带 globals.yml 与 LVM 命令）。"""
    cfg = _bootstrap()
    state = _load_state(_resolve_plan(plan, cfg))
    console.print("\n".join(render_multinode_inventory(state.nodes)), markup=False, highlight=False, soft_wrap=True)
    if with_globals:
        console.print("")
        console.print("\n".join(render_globals(state.network_config)), markup=False, highlight=False, soft_wrap=True)
        lvm = render_lvm_commands(state.nodes)
        if lvm:
            console.print("")
            console.print("\n".join(lvm), markup=False, highlight=False, soft_wrap=True)


@app.command()
def serve(
    host: str | None = typer.Option(None, help=_t("监听地址", "Bind address")),
    port: int | None = typer.Option(None, help=_t("监听端口", "Bind port")),
):
    """启动 Web API 服务。"""
    import uvicorn

    cfg = _bootstrap()
    web_cfg = cfg.get("web", {})
    bind_host = host or web_cfg.get("host", "127.0.0.1")
    bind_port = port or int(web_cfg.get("port", 8080))
    console.print(_t(
        f"启动 KollaPlan Web API，监听 {bind_host}:{bind_port}",
        f"Starting KollaPlan Web API on {bind_host}:{bind_port}",
    ))
    uvicorn.run(
        "kollaplan.interfaces.web.web_server:app",
        host=bind_host,
        port=bind_port,
        log_level="info",
        access_log=False,
    )


if __name__ == "__main__":  # pragma: no cover
    app()
