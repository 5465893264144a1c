"""
计算图工具函数
用于打印和分析标量计算图结构（整条 tape 或某个输出可达的子图）
"""

import numpy as np
from typing import Dict, List, Tuple, Union
from collections import Counter

from .engine import _topo_indices
from .node import Node, OpKind
from .tape import Tape
from .var import Value


def _collect(source: Union[Tape, Value]) -> Tuple[List[int], List[Node]]:
    """
    返回 (索引列表, 全部节点)，索引按拓扑顺序排列

    Args:
        source: Tape（整张图）或 Value（从该输出可达的子图）
    """
    if isinstance(source, Value):
        return _topo_indices(source.tape, source.idx), source.tape.nodes
    return list(range(len(source.nodes))), source.nodes


def get_graph_stats(source: Union[Tape, Value]) -> Dict:
    """
    获取计算图统计信息（不打印）

    Returns:
        统计信息字典
    """
    order, nodes = _collect(source)
    if not order:
        return {
            'nodes': 0,
            'edges': 0,
            'leaves': 0,
            'max_fan_in': 0,
            'avg_fan_in': 0.0,
            'max_fan_out': 0,
            'avg_fan_out': 0.0,
            'max_depth': 0,
            'operations': {}
        }

    n_nodes = len(order)
    n_edges = sum(len(nodes[i].operands) for i in order)
    n_leaves = sum(1 for i in order if nodes[i].op is OpKind.LEAF)

    # 统计入度
    fan_ins = [len(nodes[i].operands) for i in order]

    # 统计出度（x*x 计两次）
    fan_out_of = dict.fromkeys(order, 0)
    for i in order:
        for j in nodes[i].operands:
            fan_out_of[j] += 1
    fan_outs = list(fan_out_of.values())

    # 最长依赖链（叶子深度为 0）
    depth = {}
    for i in order:
        ops = nodes[i].operands
        depth[i] = 1 + max(depth[j] for j in ops) if ops else 0

    # 统计操作类型
    op_counter = Counter(nodes[i].op.value for i in order)

    return {
        'nodes': n_nodes,
        'edges': n_edges,
        'leaves': n_leaves,
        'max_fan_in': max(fan_ins),
        'avg_fan_in': float(np.mean(fan_ins)),
        'max_fan_out': max(fan_outs),
        'avg_fan_out': float(np.mean(fan_outs)),
        'max_depth': max(depth.values()),
        'operations': dict(op_counter)
    }


def print_graph_summary(source: Union[Tape, Value], detailed: bool = False) -> Dict:
    """
    打印计算图摘要信息

    Args:
        source: Tape 或输出 Value
        detailed: 是否打印详细节点信息（节点数 <= 100 时）

    Returns:
        包含统计信息的字典
    """
    stats = get_graph_stats(source)
    if stats['nodes'] == 0:
        print("Empty computation graph")
        return stats

    n_nodes = stats['nodes']
    print("\n" + "="*70)
    print("COMPUTATION GRAPH SUMMARY")
    print("="*70)
    print(f"Total nodes:        {n_nodes:,}")
    print(f"Leaves:             {stats['leaves']:,}")
    print(f"Total edges:        {stats['edges']:,}")
    print(f"Max fan-in:         {stats['max_fan_in']}")
    print(f"Avg fan-in:         {stats['avg_fan_in']:.2f}")
    print(f"Max fan-out:        {stats['max_fan_out']}")
    print(f"Avg fan-out:        {stats['avg_fan_out']:.2f}")
    print(f"Max depth:          {stats['max_depth']}")
    print()
    print("Operation breakdown:")
    for op_type, count in Counter(stats['operations']).most_common(10):
        pct = 100.0 * count / n_nodes
        print(f"  {op_type:12s}: {count:6,} ({pct:5.1f}%)")

    if detailed and n_nodes <= 100:
        print()
        print("="*70)
        print("DETAILED NODE LIST")
        print("="*70)
        _print_nodes(source, n_nodes)

    print("="*70 + "\n")
    return stats


def print_computation_graph(source: Union[Tape, Value], max_nodes: int = 20) -> None:
    """
    打印计算图结构（每个节点一行）

    Args:
        source: Tape 或输出 Value
        max_nodes: 最多打印多少个节点
    """
    print("\n" + "="*70)
    print("COMPUTATION GRAPH STRUCTURE")
    print("="*70)

    order, _ = _collect(source)
    if not order:
        print("Empty graph")
        return

    _print_nodes(source, max_nodes)
    if len(order) > max_nodes:
        print(f"... ({len(order) - max_nodes} more nodes)")

    print("="*70 + "\n")


def _print_nodes(source, max_nodes):
    order, nodes = _collect(source)
    for i in order[:max_nodes]:
        node = nodes[i]
        tag = node.symbol or "leaf"
        name = f" {node.label}" if node.label else ""
        if node.operands:
            parent_info = ", ".join(f"Node{j}" for j in node.operands)
            print(f"Node {i:4d}: {tag:8s} ({float(node.value):12.6f}) "
                  f"grad={float(node.grad):12.6f} <- [{parent_info}]{name}")
        else:
            print(f"Node {i:4d}: {tag:8s} ({float(node.value):12.6f}) "
                  f"grad={float(node.grad):12.6f} [leaf/input]{name}")


def analyze_graph_complexity(source: Union[Tape, Value]) -> str:
    """
    分析计算图复杂度并返回文本报告

    Returns:
        复杂度分析的文本报告
    """
    stats = get_graph_stats(source)

    if stats['nodes'] == 0:
        return "Empty computation graph"

    report = []
    report.append("Graph Complexity Analysis:")
    report.append(f"  Total operations: {stats['nodes'] - stats['leaves']:,}")
    report.append(f"  Total connections: {stats['edges']:,}")
    report.append(f"  Average branching: {stats['avg_fan_out']:.2f}")
    report.append(f"  Longest chain: {stats['max_depth']}")

    # 复杂度评估
    if stats['nodes'] < 1000:
        complexity = "Low"
    elif stats['nodes'] < 10000:
        complexity = "Medium"
    else:
        complexity = "High"

    report.append(f"  Complexity level: {complexity}")

    # 最常见的操作
    if stats['operations']:
        top_ops = sorted(stats['operations'].items(), key=lambda x: x[1], reverse=True)[:3]
        report.append("  Top operations:")
        for op, count in top_ops:
            pct = 100.0 * count / stats['nodes']
            report.append(f"    - {op}: {pct:.1f}%")

    return "\n".join(report)
