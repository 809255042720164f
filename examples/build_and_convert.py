import time
import numpy as np

from dok_matrix import DoKMatrix


num_rows = 2000
num_cols = 5000
n_entries = 200000

rng = np.random.default_rng(0)
rows = rng.integers(0, num_rows, size=n_entries).tolist()
cols = rng.integers(0, num_cols, size=n_entries).tolist()
values = rng.uniform(-1, 1, size=n_entries).astype(np.float32).tolist()

matrix = DoKMatrix(num_rows, num_cols, sparsity=n_entries / (num_rows * num_cols))

st = time.time()
print(f"Inserting {n_entries} random cells")
for r, c, v in zip(rows, cols, values):
    matrix.set(r, c, v)
print(f"  took: {time.time() - st} seconds")
print(f"  nnz: {matrix.nnz}, shape: {matrix.shape}")

st = time.time()
print(f"Converting to CSR")
csr = matrix.to_row_major_matrix()
print(f"  took: {time.time() - st} seconds")

st = time.time()
print(f"Converting to CSC")
csc = matrix.to_column_major_matrix()
print(f"  took: {time.time() - st} seconds")

assert csr.nnz == csc.nnz == matrix.nnz
r, c, v = next(matrix.each_nonzero_cell())
assert csr[r, c] == v and csc[r, c] == v
print(f"Row {r} holds {matrix.num_columns_in_row(r)} entries")
