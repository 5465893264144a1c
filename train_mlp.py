"""
Scalar AAD demo: render an MLP's graph, then train a tiny MLP.

    python train_mlp.py                      # defaults reproduce the classic run
    python train_mlp.py --steps 50 --plot-loss loss.png
"""

import argparse

from graphviz import ExecutableNotFound

from scalar_aad import leaf, run_backward, use_tape
from scalar_aad.core.graph_utils import print_graph_summary
from scalar_aad.draw import draw_dot
from scalar_aad.nn import MLP, MLPTrainer, TrainConfig


XS = [
    [2.0, 3.0, -1.0],
    [3.0, -1.0, 0.5],
    [0.5, 1.0, 1.0],
    [1.0, 1.0, -1.0],
]
YS = [1.0, -1.0, -1.0, 1.0]


def parse_args():
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        description='Scalar AAD MLP demo',
        formatter_class=argparse.ArgumentDefaultsHelpFormatter
    )
    parser.add_argument('--steps', type=int, default=20,
                        help='Training steps')
    parser.add_argument('--lr', type=float, default=0.1,
                        help='Learning rate')
    parser.add_argument('--seed', type=int, default=None,
                        help='Seed for parameter initialisation')
    parser.add_argument('--graph', type=str, default='mlp_graph',
                        help='Output path (without extension) of the rendered graph')
    parser.add_argument('--plot-loss', type=str, default=None,
                        help='Save the loss curve to this image file')
    return parser.parse_args()


def render_graph(path, seed=None):
    """Forward + backward through MLP(2, [3, 1]) and write its diagram."""
    with use_tape():
        mlp = MLP(2, [3, 1], seed=seed)
        x = [leaf(1.0, label='x1'), leaf(-1.0, label='x2')]
        output = mlp(x)
        run_backward(output)
        print_graph_summary(output)

        dot = draw_dot(output)
        source_path = dot.save(path + '.gv')
        print(f"Graph source written to {source_path}")
        try:
            print(f"Graph rendered to {dot.render(path, cleanup=True)}")
        except ExecutableNotFound:
            print("Graphviz executables not found; skipped rendering")


def plot_loss(history, path):
    import matplotlib
    matplotlib.use('Agg')
    import matplotlib.pyplot as plt

    fig, ax = plt.subplots(figsize=(6, 4))
    ax.plot(range(len(history)), history, 'o-', linewidth=1.5)
    ax.set_xlabel('Step')
    ax.set_ylabel('Loss')
    ax.set_title('MLP training loss')
    ax.grid(True, alpha=0.3)
    fig.tight_layout()
    fig.savefig(path, dpi=150)
    plt.close(fig)
    print(f"Loss curve saved to {path}")


def main():
    args = parse_args()

    render_graph(args.graph, seed=args.seed)

    model = MLP(3, [4, 4, 1], seed=args.seed)
    trainer = MLPTrainer(model, XS, YS,
                         TrainConfig(learning_rate=args.lr, steps=args.steps))
    result = trainer.fit()

    print("\nFinal predictions:")
    for x, pred, y in zip(XS, result['predictions'], YS):
        print(f"Input: {x}, Predicted: {pred:.4f}, Target: {y}")

    if args.plot_loss:
        plot_loss(result['loss_history'], args.plot_loss)


if __name__ == '__main__':
    main()
