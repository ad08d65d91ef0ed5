"""
Command-line runner.

Loads a training and a test vector file, trains the chosen clusterer, runs
the prefetch test and prints the results:

    clusterfetch kmeans --train train.dat --test test.dat --clusters 8
    clusterfetch kohonen --train train.dat --test test.dat --map-size 4 --epochs 100
"""

from typing import List, Optional, Sequence
import argparse
import sys

from .algorithms.builder import ClusteringBuilder
from .algorithms.kohonen import Kohonen
from .base.clustering_base import BaseClusteringAlgorithm
from .base.data_structures import PrefetchReport
from .utils.io import load_vectors


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog='clusterfetch',
        description='Cluster client access vectors and score prefetch predictions.'
    )

    common = argparse.ArgumentParser(add_help=False)
    common.add_argument('--train', required=True, help='Training vector file')
    common.add_argument('--test', required=True, help='Test vector file (same client order)')
    common.add_argument('--dim', type=int, default=None,
                        help='Vector dimensionality (default: width of the data)')
    common.add_argument('--delimiter', default=None,
                        help='Value separator in the vector files (default: whitespace)')
    common.add_argument('--threshold', type=float, default=0.5,
                        help='Prefetch threshold (default: 0.5)')
    common.add_argument('--seed', type=int, default=None, help='Random seed')
    common.add_argument('--show-members', action='store_true',
                        help='Print the members of every cluster')
    common.add_argument('--show-prototypes', action='store_true',
                        help='Print the prototype of every cluster')
    common.add_argument('--sweep', type=float, nargs='+', metavar='T', default=None,
                        help='Also report results for these thresholds')
    common.add_argument('-v', '--verbose', action='count', default=0,
                        help='Print training progress (repeat for more)')

    subparsers = parser.add_subparsers(dest='algorithm', required=True)

    kmeans = subparsers.add_parser('kmeans', parents=[common], help='K-means clustering')
    kmeans.add_argument('--clusters', type=int, required=True, help='Number of clusters k')
    kmeans.add_argument('--max-iter', type=int, default=None,
                        help='Iteration cap (default: until membership is stable)')

    kohonen = subparsers.add_parser('kohonen', parents=[common], help='Kohonen map clustering')
    kohonen.add_argument('--map-size', type=int, required=True, help='Side length n of the n x n map')
    kohonen.add_argument('--epochs', type=int, required=True, help='Number of training epochs')
    kohonen.add_argument('--learning-rate', type=float, default=Kohonen.INITIAL_LEARNING_RATE,
                         help='Initial learning rate (default: 0.8)')

    return parser


def format_report(report: PrefetchReport) -> str:
    return '\n'.join([
        f"Prefetch threshold={report.prefetch_threshold}",
        f"Hitrate: {report.hitrate}",
        f"Accuracy: {report.accuracy}",
        f"Hitrate+Accuracy={report.combined}",
    ])


def _cluster_name(model: BaseClusteringAlgorithm, index: int) -> str:
    if isinstance(model, Kohonen):
        row, col = divmod(index, model.map_size)
        return f"cluster[{row}][{col}]"
    return f"cluster[{index}]"


def format_members(model: BaseClusteringAlgorithm) -> str:
    return '\n'.join(
        f"Members {_cluster_name(model, k)} :{sorted(members)}"
        for k, members in enumerate(model.members_)
    )


def format_prototypes(model: BaseClusteringAlgorithm, precision: int = 4) -> str:
    lines = []
    for k, prototype in enumerate(model.prototypes_.tolist()):
        values = ' '.join(f"{value:.{precision}f}" for value in prototype)
        lines.append(f"Prototype {_cluster_name(model, k)} : {values}")
    return '\n'.join(lines)


def format_sweep(reports: Sequence[PrefetchReport]) -> str:
    lines = [f"{'threshold':>10} {'hitrate':>10} {'accuracy':>10} {'combined':>10}"]
    for report in reports:
        lines.append(f"{report.prefetch_threshold:>10.3f} {report.hitrate:>10.4f} "
                     f"{report.accuracy:>10.4f} {report.combined:>10.4f}")
    return '\n'.join(lines)


def run(args: argparse.Namespace) -> int:
    train_data = load_vectors(args.train, delimiter=args.delimiter, dim=args.dim)
    test_data = load_vectors(args.test, delimiter=args.delimiter, dim=args.dim)

    builder = (ClusteringBuilder()
               .with_data(train_data, test_data, dim=args.dim)
               .with_prefetch_threshold(args.threshold)
               .with_verbose(args.verbose)
               .with_random_state(args.seed))

    if args.algorithm == 'kmeans':
        model = builder.kmeans(n_clusters=args.clusters, max_iter=args.max_iter)
    else:
        model = builder.kohonen(map_size=args.map_size, epochs=args.epochs,
                                initial_learning_rate=args.learning_rate)

    if not model.train():
        print("Training failed: the training set is empty", file=sys.stderr)
        return 1

    if args.show_members:
        print(format_members(model))
    if args.show_prototypes:
        print(format_prototypes(model))

    model.test()

    if isinstance(model, Kohonen):
        print(f"Initial learning Rate={model.initial_learning_rate}")
    print(format_report(model.report()))

    if args.sweep:
        print()
        print(format_sweep(model.threshold_sweep(args.sweep)))

    return 0


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        return run(args)
    except (OSError, ValueError, TypeError) as e:
        parser.error(str(e))
