import numpy as np
import scipy.sparse


class PathMatrixBuilder(object):
    """
    Column-by-column construction of a `scipy.sparse.csc_array` holding
    a coefficient path: row 0 is the intercept, rows `1..nvars` the
    coefficients. Columns are appended in order and the matrix is
    assembled once, by `compress`.

    Parameters
    ----------
    nrow: int
        Number of rows, i.e. `nvars + 1`.
    """

    def __init__(self, nrow):
        self.nrow = nrow
        self._indptr = [0]
        self._indices = []
        self._data = []
        self._nnz = 0
        self._compressed = False

    @property
    def ncol(self):
        return len(self._indptr) - 1

    def add_column(self, beta0, coef):
        """
        Append one column.

        Parameters
        ----------
        beta0: float
            Intercept, always stored (even if zero).
        coef: Union[scipy.sparse.csc_array, np.ndarray]
            Coefficients; a sparse column of shape `(nrow-1, 1)` or a
            dense vector whose zeros are not stored.
        """
        if self._compressed:
            raise RuntimeError('path matrix has been compressed; no more columns can be added')

        if scipy.sparse.issparse(coef):
            coef = scipy.sparse.csc_array(coef)
            if coef.shape != (self.nrow - 1, 1):
                raise ValueError('coef should have shape {0}, got {1}'.format((self.nrow - 1, 1), coef.shape))
            coef.sort_indices()
            rows, values = coef.indices, coef.data
        else:
            coef = np.asarray(coef, float).reshape(-1)
            if coef.shape[0] != self.nrow - 1:
                raise ValueError('coef should have length {0}, got {1}'.format(self.nrow - 1, coef.shape[0]))
            rows = np.nonzero(coef)[0]
            values = coef[rows]

        self._indices.append(np.hstack([[0], rows + 1]).astype(np.int64))
        self._data.append(np.hstack([[beta0], values]).astype(float))
        self._nnz += rows.shape[0] + 1
        self._indptr.append(self._nnz)

    def compress(self):
        """
        Assemble the path matrix. No columns may be added afterwards.
        """
        self._compressed = True
        if self._indices:
            indices = np.concatenate(self._indices)
            data = np.concatenate(self._data)
        else:
            indices = np.zeros(0, np.int64)
            data = np.zeros(0)
        return scipy.sparse.csc_array((data,
                                       indices,
                                       np.asarray(self._indptr, np.int64)),
                                      shape=(self.nrow, self.ncol))
