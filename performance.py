# performance.py – AES-256-CBC encrypt/decrypt timing
import argparse
import json
import logging
import os
import time
from typing import List, Optional

import matplotlib.pyplot as plt
import numpy as np

from secure_encryption import SecureEncryption, generate_key

logger = logging.getLogger(__name__)

PERF_FILE = "performance_log.json"
DEFAULT_SIZES_KB = [10, 50, 100, 200, 500]


# ------------------ Measure Function ------------------
def measure_time(func, *args, **kwargs):
    """Measure execution time of a function"""
    start = time.perf_counter()
    result = func(*args, **kwargs)
    end = time.perf_counter()
    elapsed = end - start
    return result, elapsed


# ------------------ Log Performance Data ------------------
def _save_perf_record(data, perf_file: str = PERF_FILE):
    """Append timing results to JSON log"""
    existing = []
    if os.path.exists(perf_file):
        with open(perf_file, "r") as f:
            try:
                existing = json.load(f)
            except json.JSONDecodeError:
                logger.warning("performance log %s is corrupt, starting a new one", perf_file)
                existing = []
    if not isinstance(existing, list):
        existing = []
    existing.append(data)
    with open(perf_file, "w") as f:
        json.dump(existing, f, indent=4)


# ------------------ Run Performance Test ------------------
def run_benchmark(sample_size: int = 1_000_000, perf_file: Optional[str] = PERF_FILE):
    """Time byte and string encryption/decryption over ``sample_size`` random bytes"""
    sample_data = os.urandom(sample_size)
    sample_text = sample_data.hex()[:sample_size]

    with SecureEncryption(generate_key()) as enc:
        blob, enc_time = measure_time(enc.encrypt_bytes, sample_data)
        _, dec_time = measure_time(enc.decrypt_bytes, blob)
        token, enc_str_time = measure_time(enc.encrypt_string, sample_text)
        _, dec_str_time = measure_time(enc.decrypt_string, token)

    result = {
        "sample_size": sample_size,
        "encrypt_bytes": enc_time,
        "decrypt_bytes": dec_time,
        "encrypt_string": enc_str_time,
        "decrypt_string": dec_str_time,
    }
    if perf_file:
        _save_perf_record(result, perf_file)
    return result


def measure_sizes(sizes_kb: List[int]):
    """Encrypt/decrypt timings for payloads of increasing size (in KB)"""
    enc_times = []
    dec_times = []
    with SecureEncryption(generate_key()) as enc:
        for kb in sizes_kb:
            data = os.urandom(kb * 1024)
            blob, t1 = measure_time(enc.encrypt_bytes, data)
            _, t2 = measure_time(enc.decrypt_bytes, blob)
            enc_times.append(t1)
            dec_times.append(t2)
    return enc_times, dec_times


# ------------------ Bar Graph Display ------------------
def show_bar_graph(result=None, show: bool = True):
    """Display encrypt/decrypt timings as a bar chart"""
    if result is None:
        result = run_benchmark()

    labels = ['Encrypt Bytes', 'Decrypt Bytes', 'Encrypt String', 'Decrypt String']
    times = [
        result["encrypt_bytes"],
        result["decrypt_bytes"],
        result["encrypt_string"],
        result["decrypt_string"],
    ]

    colors = ['#4CAF50', '#2196F3', '#FF9800', '#9C27B0']
    xpos = np.arange(len(labels))

    fig = plt.figure(figsize=(8, 5))
    bars = plt.bar(xpos, times, color=colors, width=0.5)
    plt.xticks(xpos, labels, fontsize=11)
    plt.ylabel("Time (seconds)", fontsize=12)
    plt.title("AES-256-CBC Encryption/Decryption Performance", fontsize=13, weight="bold")
    plt.grid(axis='y', linestyle='--', alpha=0.7)

    # Annotate bar values
    for bar, time_val in zip(bars, times):
        plt.text(bar.get_x() + bar.get_width()/2, bar.get_height() + 0.001,
                 f"{time_val:.4f}s", ha='center', fontsize=10, color='black', weight='bold')

    plt.tight_layout()
    if show:
        plt.show()
    return fig


# ------------------ Size Series Plot ------------------
def plot_comparison(sizes_kb, enc_times, dec_times, show: bool = True):
    """Line plot of encrypt vs decrypt time per payload size"""
    sizes = np.asarray(sizes_kb)
    fig = plt.figure(figsize=(8, 5))
    plt.plot(sizes, enc_times, marker='o', color='#4CAF50', label='Encrypt')
    plt.plot(sizes, dec_times, marker='s', color='#2196F3', label='Decrypt')
    plt.xlabel("Payload size (KB)", fontsize=12)
    plt.ylabel("Time (seconds)", fontsize=12)
    plt.title("AES-256-CBC Time vs Payload Size", fontsize=13, weight="bold")
    plt.grid(linestyle='--', alpha=0.7)
    plt.legend()
    plt.tight_layout()
    if show:
        plt.show()
    return fig


def main(argv: Optional[List[str]] = None) -> int:
    p = argparse.ArgumentParser(description="Benchmark AES-256-CBC encryption")
    p.add_argument("--sizes", type=int, nargs="+", default=DEFAULT_SIZES_KB,
                   help="Payload sizes in KB for the size series")
    p.add_argument("--perf-file", default=PERF_FILE)
    p.add_argument("--no-show", action="store_true", help="Print timings only, no charts")
    p.add_argument("--log-level", default="INFO",
                   choices=["DEBUG", "INFO", "WARNING", "ERROR"])
    args = p.parse_args(argv)
    logging.basicConfig(level=getattr(logging, args.log_level), format="%(levelname)s %(name)s: %(message)s")

    result = run_benchmark(perf_file=args.perf_file)
    for name in ("encrypt_bytes", "decrypt_bytes", "encrypt_string", "decrypt_string"):
        print(f"{name:15s} {result[name]:.4f}s")
    enc_times, dec_times = measure_sizes(args.sizes)
    for kb, t1, t2 in zip(args.sizes, enc_times, dec_times):
        print(f"{kb:6d} KB  encrypt {t1:.4f}s  decrypt {t2:.4f}s")

    if not args.no_show:
        show_bar_graph(result)
        plot_comparison(args.sizes, enc_times, dec_times)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
